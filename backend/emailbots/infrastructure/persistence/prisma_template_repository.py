"""
Prisma Template Repository Implementation (table `templates`).
"""

from typing import Any, Mapping, Optional

from prisma import Prisma
from prisma.models import Template as PrismaTemplate

from emailbots.domain.entities.email_template import EmailTemplate, TemplateCategory
from emailbots.domain.ports.repositories import TemplateRepository
from emailbots.domain.value_objects.user_id import UserId
from emailbots.infrastructure.persistence._gateway import gateway_errors, to_row

_TABLE = "templates"
_WRITABLE = frozenset(
    {
        "name",
        "category",
        "subject",
        "content",
        "variables",
        "language",
        "is_active",
        "tags",
        "last_modified",
    }
)


class PrismaTemplateRepository(TemplateRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaTemplate) -> EmailTemplate:
        return EmailTemplate(
            id=record.id,
            name=record.name,
            category=TemplateCategory(record.category),
            subject=record.subject,
            content=record.content,
            last_modified=record.last_modified,
            variables=tuple(record.variables or ()),
            language=record.language,
            is_active=record.is_active,
            tags=tuple(record.tags or ()),
            created_by=record.created_by,
        )

    async def list_for_creator(self, user_id: UserId) -> list[EmailTemplate]:
        with gateway_errors(_TABLE):
            records = await self._prisma.template.find_many(
                where={"created_by": user_id.value},
                order={"last_modified": "desc"},
            )
        return [self._to_entity(r) for r in records]

    async def get_by_id(self, template_id: str) -> Optional[EmailTemplate]:
        with gateway_errors(_TABLE):
            record = await self._prisma.template.find_unique(where={"id": template_id})
        return self._to_entity(record) if record else None

    async def create(self, created_by: UserId, fields: Mapping[str, Any]) -> EmailTemplate:
        data = to_row(fields, _WRITABLE)
        data["created_by"] = created_by.value
        with gateway_errors(_TABLE):
            record = await self._prisma.template.create(data=data)
        return self._to_entity(record)

    async def update(
        self, template_id: str, fields: Mapping[str, Any]
    ) -> Optional[EmailTemplate]:
        with gateway_errors(_TABLE):
            record = await self._prisma.template.update(
                where={"id": template_id}, data=to_row(fields, _WRITABLE)
            )
        return self._to_entity(record) if record else None

    async def delete(self, template_id: str) -> bool:
        with gateway_errors(_TABLE):
            record = await self._prisma.template.delete(where={"id": template_id})
        return record is not None
