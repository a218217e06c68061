"""
KnowledgeBaseItem Entity - A document or website the bots can draw on.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class KnowledgeBaseType(str, Enum):
    DOCUMENT = "document"
    WEBSITE = "website"


class KnowledgeBaseStatus(str, Enum):
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class KnowledgeBaseItem:
    id: str
    name: str
    type: KnowledgeBaseType
    source: str
    status: KnowledgeBaseStatus
    last_updated: datetime
    description: str = ""
    tags: tuple[str, ...] = ()
    created_by: Optional[str] = None

    @staticmethod
    def status_after_edit(item_type: KnowledgeBaseType) -> KnowledgeBaseStatus:
        """Websites are re-crawled after an edit; documents are ready as-is."""
        if item_type == KnowledgeBaseType.WEBSITE:
            return KnowledgeBaseStatus.PROCESSING
        return KnowledgeBaseStatus.READY
