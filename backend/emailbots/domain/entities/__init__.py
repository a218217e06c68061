"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Is an immutable dataclass, so snapshots can share instances safely
- Pure Python dataclasses (no ORM, no Pydantic)
"""

from emailbots.domain.entities.bot import Bot, BotStatus, AssistantStatus
from emailbots.domain.entities.email_template import EmailTemplate, TemplateCategory
from emailbots.domain.entities.fine_tuning_question import FineTuningQuestion, Difficulty
from emailbots.domain.entities.knowledge_base_item import (
    KnowledgeBaseItem,
    KnowledgeBaseStatus,
    KnowledgeBaseType,
)
from emailbots.domain.entities.conversation import (
    Conversation,
    ConversationStatus,
    Sentiment,
)
from emailbots.domain.entities.message import Attachment, Message, MessageSender

__all__ = [
    "Bot",
    "BotStatus",
    "AssistantStatus",
    "EmailTemplate",
    "TemplateCategory",
    "FineTuningQuestion",
    "Difficulty",
    "KnowledgeBaseItem",
    "KnowledgeBaseStatus",
    "KnowledgeBaseType",
    "Conversation",
    "ConversationStatus",
    "Sentiment",
    "Attachment",
    "Message",
    "MessageSender",
]
