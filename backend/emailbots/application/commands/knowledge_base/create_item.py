"""
Create Knowledge Base Item Command.

Website sources get an https:// scheme when none is given and must then be
an absolute http(s) URL. Source uniqueness is pre-checked, and a unique
constraint conflict from the store is reported the same way.
New items start in `processing`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from emailbots.application.common.interfaces import Command, CommandHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.application.commands.knowledge_base._source import resolve_source
from emailbots.application.dto.knowledge_base import KnowledgeBaseItemCreate
from emailbots.domain.value_objects.string_set import unique_strings
from emailbots.domain.entities.knowledge_base_item import (
    KnowledgeBaseItem,
    KnowledgeBaseStatus,
)
from emailbots.domain.exceptions import DuplicateSourceError, GatewayConflictError
from emailbots.domain.ports.repositories import KnowledgeBaseRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateKnowledgeBaseItemCommand(Command[ServiceResult[KnowledgeBaseItem]]):
    user_id: Optional[UserId]
    payload: KnowledgeBaseItemCreate


class CreateKnowledgeBaseItemHandler(CommandHandler[ServiceResult[KnowledgeBaseItem]]):
    def __init__(self, knowledge_base_repository: KnowledgeBaseRepository):
        self._items = knowledge_base_repository

    async def execute(
        self, command: CreateKnowledgeBaseItemCommand
    ) -> ServiceResult[KnowledgeBaseItem]:
        payload = command.payload
        try:
            user_id = require_identity(command.user_id, "add to the knowledge base")
            source = resolve_source(payload.type, payload.source)

            if await self._items.find_by_source(source) is not None:
                raise DuplicateSourceError(source)

            try:
                item = await self._items.create(
                    user_id,
                    {
                        "name": payload.name,
                        "type": payload.type,
                        "source": source,
                        "status": KnowledgeBaseStatus.PROCESSING,
                        "description": payload.description or "",
                        "tags": unique_strings(payload.tags),
                        "last_updated": datetime.now(timezone.utc),
                    },
                )
            except GatewayConflictError as e:
                raise DuplicateSourceError(source) from e
        except SERVICE_ERRORS as e:
            logger.warning(f"[KB] Create failed: {e}")
            return ServiceResult.from_exception(e)

        logger.info(f"[KB] Added {item.type.value} {item.source}")
        return ServiceResult.ok(item)
