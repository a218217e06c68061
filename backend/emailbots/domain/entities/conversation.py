"""
Conversation Entity - An email thread handled by one bot.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from emailbots.domain.entities.message import Message


class ConversationStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    PENDING = "pending"
    FORWARDED = "forwarded"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class Conversation:
    id: str
    bot_id: str
    customer_email: str
    subject: str
    status: ConversationStatus
    started_at: datetime
    last_message_at: datetime
    total_messages: int
    sentiment: Sentiment = Sentiment.NEUTRAL
    tags: tuple[str, ...] = ()
    messages: tuple[Message, ...] = ()

    def __post_init__(self):
        # Messages are always kept in timestamp order
        ordered = tuple(sorted(self.messages, key=lambda m: m.timestamp))
        object.__setattr__(self, "messages", ordered)
