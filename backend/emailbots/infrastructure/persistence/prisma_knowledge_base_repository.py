"""
Prisma Knowledge Base Repository Implementation (table `knowledge_base`).

`source` is @unique; a duplicate write surfaces as GatewayConflictError.
"""

from typing import Any, Mapping, Optional

from prisma import Prisma
from prisma.models import KnowledgeBaseItem as PrismaKnowledgeBaseItem

from emailbots.domain.entities.knowledge_base_item import (
    KnowledgeBaseItem,
    KnowledgeBaseStatus,
    KnowledgeBaseType,
)
from emailbots.domain.ports.repositories import KnowledgeBaseRepository
from emailbots.domain.value_objects.user_id import UserId
from emailbots.infrastructure.persistence._gateway import gateway_errors, to_row

_TABLE = "knowledge_base"
_WRITABLE = frozenset(
    {"name", "type", "source", "status", "description", "tags", "last_updated"}
)


class PrismaKnowledgeBaseRepository(KnowledgeBaseRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaKnowledgeBaseItem) -> KnowledgeBaseItem:
        return KnowledgeBaseItem(
            id=record.id,
            name=record.name,
            type=KnowledgeBaseType(record.type),
            source=record.source,
            status=KnowledgeBaseStatus(record.status),
            last_updated=record.last_updated,
            description=record.description or "",
            tags=tuple(record.tags or ()),
            created_by=record.created_by,
        )

    async def list_for_creator(self, user_id: UserId) -> list[KnowledgeBaseItem]:
        with gateway_errors(_TABLE):
            records = await self._prisma.knowledgebaseitem.find_many(
                where={"created_by": user_id.value},
                order={"last_updated": "desc"},
            )
        return [self._to_entity(r) for r in records]

    async def get_by_id(self, item_id: str) -> Optional[KnowledgeBaseItem]:
        with gateway_errors(_TABLE):
            record = await self._prisma.knowledgebaseitem.find_unique(where={"id": item_id})
        return self._to_entity(record) if record else None

    async def find_by_source(
        self, source: str, exclude_id: Optional[str] = None
    ) -> Optional[KnowledgeBaseItem]:
        where: dict[str, Any] = {"source": source}
        if exclude_id:
            where["NOT"] = [{"id": exclude_id}]
        with gateway_errors(_TABLE):
            record = await self._prisma.knowledgebaseitem.find_first(where=where)
        return self._to_entity(record) if record else None

    async def create(
        self, created_by: UserId, fields: Mapping[str, Any]
    ) -> KnowledgeBaseItem:
        data = to_row(fields, _WRITABLE)
        data["created_by"] = created_by.value
        with gateway_errors(_TABLE):
            record = await self._prisma.knowledgebaseitem.create(data=data)
        return self._to_entity(record)

    async def update(
        self, item_id: str, fields: Mapping[str, Any]
    ) -> Optional[KnowledgeBaseItem]:
        with gateway_errors(_TABLE):
            record = await self._prisma.knowledgebaseitem.update(
                where={"id": item_id}, data=to_row(fields, _WRITABLE)
            )
        return self._to_entity(record) if record else None

    async def delete(self, item_id: str) -> bool:
        with gateway_errors(_TABLE):
            record = await self._prisma.knowledgebaseitem.delete(where={"id": item_id})
        return record is not None
