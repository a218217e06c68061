"""
DTOs - Data Transfer Objects

Pydantic payloads crossing the application boundary:
- bot.py            → BotCreate, BotUpdate
- template.py       → TemplateCreate, TemplateUpdate
- knowledge_base.py → KnowledgeBaseItemCreate, KnowledgeBaseItemUpdate
- fine_tuning.py    → FineTuningQuestionCreate, FineTuningQuestionUpdate

Note: These are different from domain entities.
DTOs are for input/output, entities are for business logic.
"""

from emailbots.application.dto.bot import BotCreate, BotUpdate
from emailbots.application.dto.template import TemplateCreate, TemplateUpdate
from emailbots.application.dto.knowledge_base import (
    KnowledgeBaseItemCreate,
    KnowledgeBaseItemUpdate,
)
from emailbots.application.dto.fine_tuning import (
    FineTuningQuestionCreate,
    FineTuningQuestionUpdate,
)

__all__ = [
    "BotCreate",
    "BotUpdate",
    "TemplateCreate",
    "TemplateUpdate",
    "KnowledgeBaseItemCreate",
    "KnowledgeBaseItemUpdate",
    "FineTuningQuestionCreate",
    "FineTuningQuestionUpdate",
]
