"""
Prisma Conversation Repository Implementation.

Reads `conversations` with their `messages`. Ownership runs through the
bot: a conversation is visible to whoever created its bot.

Message.attachments is a Json column holding a list of
{id, name, type, size, url} objects.
"""

from typing import Any

from prisma import Prisma
from prisma.models import Conversation as PrismaConversation
from prisma.models import Message as PrismaMessage

from emailbots.domain.entities.conversation import (
    Conversation,
    ConversationStatus,
    Sentiment,
)
from emailbots.domain.entities.message import Attachment, Message, MessageSender
from emailbots.domain.ports.repositories import ConversationRepository
from emailbots.domain.value_objects.user_id import UserId
from emailbots.infrastructure.persistence._gateway import gateway_errors

_TABLE = "conversations"


def _to_attachment(raw: dict[str, Any]) -> Attachment:
    return Attachment(
        id=str(raw.get("id", "")),
        name=str(raw.get("name", "")),
        type=str(raw.get("type", "")),
        size=int(raw.get("size") or 0),
        url=str(raw.get("url", "")),
    )


class PrismaConversationRepository(ConversationRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_message(self, record: PrismaMessage) -> Message:
        attachments = record.attachments if isinstance(record.attachments, list) else []
        return Message(
            id=record.id,
            conversation_id=record.conversation_id,
            sender=MessageSender(record.sender),
            content=record.content,
            timestamp=record.timestamp,
            attachments=tuple(_to_attachment(a) for a in attachments if isinstance(a, dict)),
        )

    def _to_entity(self, record: PrismaConversation) -> Conversation:
        return Conversation(
            id=record.id,
            bot_id=record.bot_id,
            customer_email=record.customer_email,
            subject=record.subject,
            status=ConversationStatus(record.status),
            started_at=record.started_at,
            last_message_at=record.last_message_at,
            total_messages=record.total_messages,
            sentiment=Sentiment(record.sentiment),
            tags=tuple(record.tags or ()),
            messages=tuple(self._to_message(m) for m in record.messages or ()),
        )

    async def list_for_bot_owner(self, user_id: UserId) -> list[Conversation]:
        with gateway_errors(_TABLE):
            records = await self._prisma.conversation.find_many(
                where={"bot": {"is": {"created_by": user_id.value}}},
                order={"last_message_at": "desc"},
                include={"messages": {"order_by": {"timestamp": "asc"}}},
            )
        return [self._to_entity(r) for r in records]
