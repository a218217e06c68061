"""
REPOSITORY PORTS - Gateway table interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines the row operations the application needs
- Does NOT specify implementation (Prisma, in-memory, etc.)

Infrastructure layer provides implementations.
"""

from emailbots.domain.ports.repositories.bot_repository import BotRepository
from emailbots.domain.ports.repositories.template_repository import TemplateRepository
from emailbots.domain.ports.repositories.knowledge_base_repository import (
    KnowledgeBaseRepository,
)
from emailbots.domain.ports.repositories.fine_tuning_question_repository import (
    BotQuestionLinkRepository,
    FineTuningQuestionRepository,
)
from emailbots.domain.ports.repositories.conversation_repository import (
    ConversationRepository,
)

__all__ = [
    "BotRepository",
    "TemplateRepository",
    "KnowledgeBaseRepository",
    "FineTuningQuestionRepository",
    "BotQuestionLinkRepository",
    "ConversationRepository",
]
