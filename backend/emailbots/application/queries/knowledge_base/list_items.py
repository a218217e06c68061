"""List Knowledge Base Items Query."""

from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.interfaces import Query, QueryHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.domain.entities.knowledge_base_item import KnowledgeBaseItem
from emailbots.domain.ports.repositories import KnowledgeBaseRepository
from emailbots.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListKnowledgeBaseQuery(Query[ServiceResult[list[KnowledgeBaseItem]]]):
    user_id: Optional[UserId]


class ListKnowledgeBaseHandler(QueryHandler[ServiceResult[list[KnowledgeBaseItem]]]):
    def __init__(self, knowledge_base_repository: KnowledgeBaseRepository):
        self._items = knowledge_base_repository

    async def execute(
        self, query: ListKnowledgeBaseQuery
    ) -> ServiceResult[list[KnowledgeBaseItem]]:
        try:
            user_id = require_identity(query.user_id, "view the knowledge base")
            return ServiceResult.ok(await self._items.list_for_creator(user_id))
        except SERVICE_ERRORS as e:
            return ServiceResult.from_exception(e)
