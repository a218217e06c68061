"""
Update Knowledge Base Item Command.

A new source (or a type change) is normalized and re-checked for
uniqueness, excluding the item itself. Every edit resets status: websites go
back to `processing` for a re-crawl, documents are `ready`.
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
from emailbots.application.dto.knowledge_base import KnowledgeBaseItemUpdate
from emailbots.domain.value_objects.string_set import unique_strings
from emailbots.domain.entities.knowledge_base_item import KnowledgeBaseItem
from emailbots.domain.exceptions import (
    DuplicateSourceError,
    EntityNotFoundError,
    GatewayConflictError,
)
from emailbots.domain.ports.repositories import KnowledgeBaseRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateKnowledgeBaseItemCommand(Command[ServiceResult[KnowledgeBaseItem]]):
    user_id: Optional[UserId]
    item_id: str
    payload: KnowledgeBaseItemUpdate


class UpdateKnowledgeBaseItemHandler(CommandHandler[ServiceResult[KnowledgeBaseItem]]):
    def __init__(self, knowledge_base_repository: KnowledgeBaseRepository):
        self._items = knowledge_base_repository

    async def execute(
        self, command: UpdateKnowledgeBaseItemCommand
    ) -> ServiceResult[KnowledgeBaseItem]:
        fields = command.payload.changes()
        if "tags" in fields:
            fields["tags"] = unique_strings(fields["tags"])

        try:
            user_id = require_identity(command.user_id, "update the knowledge base")

            existing = await self._items.get_by_id(command.item_id)
            if existing is None or existing.created_by != user_id.value:
                raise EntityNotFoundError("Knowledge base item not found")
            if not fields:
                return ServiceResult.ok(existing)

            item_type = fields.get("type", existing.type)
            if "source" in fields or "type" in fields:
                source = resolve_source(item_type, fields.get("source", existing.source))
                clash = await self._items.find_by_source(source, exclude_id=command.item_id)
                if clash is not None:
                    raise DuplicateSourceError(source)
                fields["source"] = source

            fields["status"] = KnowledgeBaseItem.status_after_edit(item_type)
            fields["last_updated"] = datetime.now(timezone.utc)

            try:
                item = await self._items.update(command.item_id, fields)
            except GatewayConflictError as e:
                raise DuplicateSourceError(fields.get("source", existing.source)) from e
            if item is None:
                raise EntityNotFoundError("Knowledge base item not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[KB] Update of {command.item_id} failed: {e}")
            return ServiceResult.from_exception(e)

        return ServiceResult.ok(item)
