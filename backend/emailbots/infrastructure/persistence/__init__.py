"""
Persistence Layer - Database implementations.

Contains Prisma repository implementations for domain ports.
"""

from emailbots.infrastructure.persistence.prisma_bot_repository import (
    PrismaBotRepository,
)
from emailbots.infrastructure.persistence.prisma_template_repository import (
    PrismaTemplateRepository,
)
from emailbots.infrastructure.persistence.prisma_knowledge_base_repository import (
    PrismaKnowledgeBaseRepository,
)
from emailbots.infrastructure.persistence.prisma_fine_tuning_repository import (
    PrismaBotQuestionLinkRepository,
    PrismaFineTuningQuestionRepository,
)
from emailbots.infrastructure.persistence.prisma_conversation_repository import (
    PrismaConversationRepository,
)

__all__ = [
    "PrismaBotRepository",
    "PrismaTemplateRepository",
    "PrismaKnowledgeBaseRepository",
    "PrismaFineTuningQuestionRepository",
    "PrismaBotQuestionLinkRepository",
    "PrismaConversationRepository",
]
