"""List Templates Query."""

from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.interfaces import Query, QueryHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.domain.entities.email_template import EmailTemplate
from emailbots.domain.ports.repositories import TemplateRepository
from emailbots.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListTemplatesQuery(Query[ServiceResult[list[EmailTemplate]]]):
    user_id: Optional[UserId]


class ListTemplatesHandler(QueryHandler[ServiceResult[list[EmailTemplate]]]):
    def __init__(self, template_repository: TemplateRepository):
        self._templates = template_repository

    async def execute(self, query: ListTemplatesQuery) -> ServiceResult[list[EmailTemplate]]:
        try:
            user_id = require_identity(query.user_id, "view templates")
            return ServiceResult.ok(await self._templates.list_for_creator(user_id))
        except SERVICE_ERRORS as e:
            return ServiceResult.from_exception(e)
