"""Delete Template Command."""

import logging
from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.interfaces import Command, CommandHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.domain.exceptions import EntityNotFoundError
from emailbots.domain.ports.repositories import TemplateRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteTemplateCommand(Command[ServiceResult[str]]):
    user_id: Optional[UserId]
    template_id: str


class DeleteTemplateHandler(CommandHandler[ServiceResult[str]]):
    def __init__(self, template_repository: TemplateRepository):
        self._templates = template_repository

    async def execute(self, command: DeleteTemplateCommand) -> ServiceResult[str]:
        try:
            user_id = require_identity(command.user_id, "delete a template")

            existing = await self._templates.get_by_id(command.template_id)
            if existing is None or existing.created_by != user_id.value:
                raise EntityNotFoundError("Template not found")
            if not await self._templates.delete(command.template_id):
                raise EntityNotFoundError("Template not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[TEMPLATES] Delete of {command.template_id} failed: {e}")
            return ServiceResult.from_exception(e)

        return ServiceResult.ok(command.template_id)
