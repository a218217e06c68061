"""
Message Entity - A single email in a conversation thread.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MessageSender(str, Enum):
    BOT = "bot"
    CUSTOMER = "customer"
    HUMAN = "human"


@dataclass(frozen=True)
class Attachment:
    id: str
    name: str
    type: str  # MIME type
    size: int  # bytes
    url: str


@dataclass(frozen=True)
class Message:
    id: str
    conversation_id: str
    sender: MessageSender
    content: str
    timestamp: datetime
    attachments: tuple[Attachment, ...] = ()
