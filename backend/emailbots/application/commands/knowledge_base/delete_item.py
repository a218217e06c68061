"""Delete Knowledge Base Item Command."""

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
from emailbots.domain.ports.repositories import KnowledgeBaseRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteKnowledgeBaseItemCommand(Command[ServiceResult[str]]):
    user_id: Optional[UserId]
    item_id: str


class DeleteKnowledgeBaseItemHandler(CommandHandler[ServiceResult[str]]):
    def __init__(self, knowledge_base_repository: KnowledgeBaseRepository):
        self._items = knowledge_base_repository

    async def execute(self, command: DeleteKnowledgeBaseItemCommand) -> ServiceResult[str]:
        try:
            user_id = require_identity(command.user_id, "update the knowledge base")

            existing = await self._items.get_by_id(command.item_id)
            if existing is None or existing.created_by != user_id.value:
                raise EntityNotFoundError("Knowledge base item not found")
            if not await self._items.delete(command.item_id):
                raise EntityNotFoundError("Knowledge base item not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[KB] Delete of {command.item_id} failed: {e}")
            return ServiceResult.from_exception(e)

        return ServiceResult.ok(command.item_id)
