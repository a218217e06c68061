"""
Prisma Bot Repository Implementation.

Prisma Bot model (backend/prisma/schema.prisma, table `bots`):
    id, name, email_address @unique, description, status, created_at,
    last_active?, total_emails, response_rate, forward_template_id?,
    forward_email_address?, forward_email_display?, include_customer_in_forward,
    assistant_status, assistant_id?, assistant_model?, api_key_hash?, created_by

api_key_hash is never mapped onto the domain Bot; get_api_key_hash reads it for
key verification only.
"""

from typing import Any, Mapping, Optional

from prisma import Prisma
from prisma.models import Bot as PrismaBot

from emailbots.domain.entities.bot import AssistantStatus, Bot, BotStatus
from emailbots.domain.ports.repositories import BotRepository
from emailbots.domain.value_objects.user_id import UserId
from emailbots.infrastructure.persistence._gateway import gateway_errors, to_row

_TABLE = "bots"
_WRITABLE = frozenset(
    {
        "name",
        "email_address",
        "description",
        "status",
        "last_active",
        "total_emails",
        "response_rate",
        "forward_template_id",
        "forward_email_address",
        "forward_email_display",
        "include_customer_in_forward",
        "assistant_status",
        "assistant_id",
        "assistant_model",
        "api_key_hash",
    }
)


class PrismaBotRepository(BotRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaBot) -> Bot:
        return Bot(
            id=record.id,
            name=record.name,
            email_address=record.email_address,
            status=BotStatus(record.status),
            created_at=record.created_at,
            total_emails=record.total_emails,
            response_rate=record.response_rate,
            description=record.description or "",
            last_active=record.last_active,
            forward_template_id=record.forward_template_id,
            forward_email_address=record.forward_email_address,
            forward_email_display=record.forward_email_display,
            include_customer_in_forward=record.include_customer_in_forward,
            assistant_status=AssistantStatus(record.assistant_status),
            assistant_id=record.assistant_id,
            assistant_model=record.assistant_model,
            created_by=record.created_by,
        )

    async def list_for_creator(self, user_id: UserId) -> list[Bot]:
        with gateway_errors(_TABLE):
            records = await self._prisma.bot.find_many(
                where={"created_by": user_id.value},
                order={"created_at": "desc"},
            )
        return [self._to_entity(r) for r in records]

    async def get_by_id(self, bot_id: str) -> Optional[Bot]:
        with gateway_errors(_TABLE):
            record = await self._prisma.bot.find_unique(where={"id": bot_id})
        return self._to_entity(record) if record else None

    async def find_by_email(
        self, email_address: str, exclude_id: Optional[str] = None
    ) -> Optional[Bot]:
        where: dict[str, Any] = {"email_address": email_address}
        if exclude_id:
            where["NOT"] = [{"id": exclude_id}]
        with gateway_errors(_TABLE):
            record = await self._prisma.bot.find_first(where=where)
        return self._to_entity(record) if record else None

    async def list_pending_assistants(self, user_id: UserId) -> list[Bot]:
        with gateway_errors(_TABLE):
            records = await self._prisma.bot.find_many(
                where={
                    "created_by": user_id.value,
                    "assistant_status": AssistantStatus.PENDING.value,
                },
                order={"created_at": "asc"},
            )
        return [self._to_entity(r) for r in records]

    async def create(self, created_by: UserId, fields: Mapping[str, Any]) -> Bot:
        data = to_row(fields, _WRITABLE)
        data["created_by"] = created_by.value
        with gateway_errors(_TABLE):
            record = await self._prisma.bot.create(data=data)
        return self._to_entity(record)

    async def update(self, bot_id: str, fields: Mapping[str, Any]) -> Optional[Bot]:
        with gateway_errors(_TABLE):
            record = await self._prisma.bot.update(
                where={"id": bot_id}, data=to_row(fields, _WRITABLE)
            )
        return self._to_entity(record) if record else None

    async def delete(self, bot_id: str) -> bool:
        with gateway_errors(_TABLE):
            record = await self._prisma.bot.delete(where={"id": bot_id})
        return record is not None

    async def activate_assistant(self, bot_id: str, fields: Mapping[str, Any]) -> Optional[Bot]:
        with gateway_errors(_TABLE):
            count = await self._prisma.bot.update_many(
                where={"id": bot_id, "assistant_status": AssistantStatus.PENDING.value},
                data=to_row(fields, _WRITABLE),
            )
            if count != 1:
                return None
            record = await self._prisma.bot.find_unique(where={"id": bot_id})
        return self._to_entity(record) if record else None

    async def get_api_key_hash(self, bot_id: str) -> Optional[str]:
        with gateway_errors(_TABLE):
            record = await self._prisma.bot.find_unique(where={"id": bot_id})
        return record.api_key_hash if record else None
