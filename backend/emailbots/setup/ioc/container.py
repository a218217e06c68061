"""
Dishka DI Container Setup.

- InfrastructureProvider: Prisma client, OpenAI client and the concrete
  repositories / assistant provisioner behind the domain ports
- AppProvider (providers.py): handlers, background tasks, store registry

Flow:
  Container → provides → PrismaBotRepository → to → CreateBotHandler
                                  ↓
                       uses BotRepository interface
"""

import logging
from typing import AsyncIterable

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from openai import AsyncOpenAI
from prisma import Prisma

from emailbots.config.settings import Config
from emailbots.domain.ports import AssistantProvisioner
from emailbots.domain.ports.repositories import (
    BotQuestionLinkRepository,
    BotRepository,
    ConversationRepository,
    FineTuningQuestionRepository,
    KnowledgeBaseRepository,
    TemplateRepository,
)
from emailbots.infrastructure.assistants import OpenAIAssistantProvisioner
from emailbots.infrastructure.persistence import (
    PrismaBotQuestionLinkRepository,
    PrismaBotRepository,
    PrismaConversationRepository,
    PrismaFineTuningQuestionRepository,
    PrismaKnowledgeBaseRepository,
    PrismaTemplateRepository,
)
from emailbots.setup.ioc.providers import AppProvider

logger = logging.getLogger(__name__)


class InfrastructureProvider(Provider):
    scope = Scope.APP

    # ==================== DATABASE ====================

    @provide
    async def get_prisma(self) -> AsyncIterable[Prisma]:
        """
        Provide Prisma client (singleton, app-scoped).

        - connected when first requested, disconnected on container close
        """
        prisma = Prisma()
        await prisma.connect()
        logger.info("[IOC] Prisma connected")
        yield prisma
        await prisma.disconnect()
        logger.info("[IOC] Prisma disconnected")

    # ==================== OPENAI CLIENT ====================

    @provide
    async def get_openai_client(self) -> AsyncIterable[AsyncOpenAI]:
        client = AsyncOpenAI(api_key=Config.OPENAI_KEY)
        yield client
        await client.close()

    @provide
    def get_provisioner(self, client: AsyncOpenAI) -> AssistantProvisioner:
        return OpenAIAssistantProvisioner(client)

    # ==================== REPOSITORIES ====================

    @provide
    def get_bot_repository(self, prisma: Prisma) -> BotRepository:
        """
        - Return type is ABSTRACT (BotRepository)
        - Implementation is CONCRETE (PrismaBotRepository)
        """
        return PrismaBotRepository(prisma)

    @provide
    def get_template_repository(self, prisma: Prisma) -> TemplateRepository:
        return PrismaTemplateRepository(prisma)

    @provide
    def get_knowledge_base_repository(self, prisma: Prisma) -> KnowledgeBaseRepository:
        return PrismaKnowledgeBaseRepository(prisma)

    @provide
    def get_question_repository(self, prisma: Prisma) -> FineTuningQuestionRepository:
        return PrismaFineTuningQuestionRepository(prisma)

    @provide
    def get_link_repository(self, prisma: Prisma) -> BotQuestionLinkRepository:
        return PrismaBotQuestionLinkRepository(prisma)

    @provide
    def get_conversation_repository(self, prisma: Prisma) -> ConversationRepository:
        return PrismaConversationRepository(prisma)


def create_container() -> AsyncContainer:
    """
    Create and configure the DI container.

    Call this ONCE per app; closing it waits for background provisioning
    and disconnects Prisma.
    """
    return make_async_container(InfrastructureProvider(), AppProvider())
