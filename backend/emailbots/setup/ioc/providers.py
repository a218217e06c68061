"""
Application provider - handlers, the dashboard store registry and the
background task runner.

Depends only on ports (repositories, AssistantProvisioner), so any
infrastructure provider that supplies those can be combined with it.
"""

import logging
from typing import AsyncIterable

from dishka import Provider, Scope, provide

from emailbots.application.commands.bots import (
    CreateBotHandler,
    DeleteBotHandler,
    IssueBotApiKeyHandler,
    ProvisionAssistantHandler,
    ReconcilePendingAssistantsHandler,
    UpdateBotHandler,
)
from emailbots.application.commands.fine_tuning import (
    CreateFineTuningQuestionHandler,
    DeleteFineTuningQuestionHandler,
    UpdateFineTuningQuestionHandler,
)
from emailbots.application.commands.knowledge_base import (
    CreateKnowledgeBaseItemHandler,
    DeleteKnowledgeBaseItemHandler,
    UpdateKnowledgeBaseItemHandler,
)
from emailbots.application.commands.templates import (
    CreateTemplateHandler,
    DeleteTemplateHandler,
    UpdateTemplateHandler,
)
from emailbots.application.common import BackgroundTaskRunner
from emailbots.application.queries import (
    AuthenticateBotHandler,
    ListBotsHandler,
    ListConversationsHandler,
    ListFineTuningQuestionsHandler,
    ListKnowledgeBaseHandler,
    ListTemplatesHandler,
)
from emailbots.application.store import DashboardHandlers
from emailbots.domain.ports import AssistantProvisioner
from emailbots.domain.ports.repositories import (
    BotQuestionLinkRepository,
    BotRepository,
    ConversationRepository,
    FineTuningQuestionRepository,
    KnowledgeBaseRepository,
    TemplateRepository,
)
from emailbots.presentation.store_registry import StoreRegistry

logger = logging.getLogger(__name__)


class AppProvider(Provider):
    """
    Everything here is APP scoped: handlers are stateless and the store
    registry holds per-identity snapshots for the life of the process.
    """

    scope = Scope.APP

    # ==================== BACKGROUND TASKS ====================

    @provide
    async def get_task_runner(self) -> AsyncIterable[BackgroundTaskRunner]:
        runner = BackgroundTaskRunner()
        yield runner
        if runner.pending:
            logger.info(f"[IOC] Waiting for {runner.pending} background tasks")
        await runner.join()

    # ==================== BOT HANDLERS ====================

    @provide
    def get_provision_handler(
        self, bot_repository: BotRepository, provisioner: AssistantProvisioner
    ) -> ProvisionAssistantHandler:
        return ProvisionAssistantHandler(bot_repository, provisioner)

    @provide
    def get_create_bot_handler(
        self,
        bot_repository: BotRepository,
        provision_handler: ProvisionAssistantHandler,
        task_runner: BackgroundTaskRunner,
    ) -> CreateBotHandler:
        return CreateBotHandler(bot_repository, provision_handler, task_runner)

    @provide
    def get_update_bot_handler(
        self, bot_repository: BotRepository, provisioner: AssistantProvisioner
    ) -> UpdateBotHandler:
        return UpdateBotHandler(bot_repository, provisioner)

    @provide
    def get_delete_bot_handler(
        self, bot_repository: BotRepository, provisioner: AssistantProvisioner
    ) -> DeleteBotHandler:
        return DeleteBotHandler(bot_repository, provisioner)

    @provide
    def get_reconcile_handler(
        self, bot_repository: BotRepository, provision_handler: ProvisionAssistantHandler
    ) -> ReconcilePendingAssistantsHandler:
        return ReconcilePendingAssistantsHandler(bot_repository, provision_handler)

    @provide
    def get_issue_api_key_handler(self, bot_repository: BotRepository) -> IssueBotApiKeyHandler:
        return IssueBotApiKeyHandler(bot_repository)

    @provide
    def get_authenticate_bot_handler(self, bot_repository: BotRepository) -> AuthenticateBotHandler:
        return AuthenticateBotHandler(bot_repository)

    @provide
    def get_list_bots_handler(self, bot_repository: BotRepository) -> ListBotsHandler:
        return ListBotsHandler(bot_repository)

    # ==================== TEMPLATE HANDLERS ====================

    @provide
    def get_create_template_handler(
        self, template_repository: TemplateRepository
    ) -> CreateTemplateHandler:
        return CreateTemplateHandler(template_repository)

    @provide
    def get_update_template_handler(
        self, template_repository: TemplateRepository
    ) -> UpdateTemplateHandler:
        return UpdateTemplateHandler(template_repository)

    @provide
    def get_delete_template_handler(
        self, template_repository: TemplateRepository
    ) -> DeleteTemplateHandler:
        return DeleteTemplateHandler(template_repository)

    @provide
    def get_list_templates_handler(
        self, template_repository: TemplateRepository
    ) -> ListTemplatesHandler:
        return ListTemplatesHandler(template_repository)

    # ==================== KNOWLEDGE BASE HANDLERS ====================

    @provide
    def get_create_item_handler(
        self, knowledge_base_repository: KnowledgeBaseRepository
    ) -> CreateKnowledgeBaseItemHandler:
        return CreateKnowledgeBaseItemHandler(knowledge_base_repository)

    @provide
    def get_update_item_handler(
        self, knowledge_base_repository: KnowledgeBaseRepository
    ) -> UpdateKnowledgeBaseItemHandler:
        return UpdateKnowledgeBaseItemHandler(knowledge_base_repository)

    @provide
    def get_delete_item_handler(
        self, knowledge_base_repository: KnowledgeBaseRepository
    ) -> DeleteKnowledgeBaseItemHandler:
        return DeleteKnowledgeBaseItemHandler(knowledge_base_repository)

    @provide
    def get_list_items_handler(
        self, knowledge_base_repository: KnowledgeBaseRepository
    ) -> ListKnowledgeBaseHandler:
        return ListKnowledgeBaseHandler(knowledge_base_repository)

    # ==================== FINE-TUNING HANDLERS ====================

    @provide
    def get_create_question_handler(
        self,
        question_repository: FineTuningQuestionRepository,
        link_repository: BotQuestionLinkRepository,
    ) -> CreateFineTuningQuestionHandler:
        return CreateFineTuningQuestionHandler(question_repository, link_repository)

    @provide
    def get_update_question_handler(
        self,
        question_repository: FineTuningQuestionRepository,
        link_repository: BotQuestionLinkRepository,
    ) -> UpdateFineTuningQuestionHandler:
        return UpdateFineTuningQuestionHandler(question_repository, link_repository)

    @provide
    def get_delete_question_handler(
        self,
        question_repository: FineTuningQuestionRepository,
        link_repository: BotQuestionLinkRepository,
    ) -> DeleteFineTuningQuestionHandler:
        return DeleteFineTuningQuestionHandler(question_repository, link_repository)

    @provide
    def get_list_questions_handler(
        self,
        question_repository: FineTuningQuestionRepository,
        link_repository: BotQuestionLinkRepository,
    ) -> ListFineTuningQuestionsHandler:
        return ListFineTuningQuestionsHandler(question_repository, link_repository)

    # ==================== CONVERSATIONS ====================

    @provide
    def get_list_conversations_handler(
        self, conversation_repository: ConversationRepository
    ) -> ListConversationsHandler:
        return ListConversationsHandler(conversation_repository)

    # ==================== STORE ====================

    @provide
    def get_dashboard_handlers(
        self,
        list_bots: ListBotsHandler,
        list_templates: ListTemplatesHandler,
        list_fine_tuning_questions: ListFineTuningQuestionsHandler,
        list_knowledge_base: ListKnowledgeBaseHandler,
        list_conversations: ListConversationsHandler,
        create_bot: CreateBotHandler,
        update_bot: UpdateBotHandler,
        delete_bot: DeleteBotHandler,
        reconcile_assistants: ReconcilePendingAssistantsHandler,
        issue_bot_api_key: IssueBotApiKeyHandler,
        create_template: CreateTemplateHandler,
        update_template: UpdateTemplateHandler,
        delete_template: DeleteTemplateHandler,
        create_knowledge_base_item: CreateKnowledgeBaseItemHandler,
        update_knowledge_base_item: UpdateKnowledgeBaseItemHandler,
        delete_knowledge_base_item: DeleteKnowledgeBaseItemHandler,
        create_fine_tuning_question: CreateFineTuningQuestionHandler,
        update_fine_tuning_question: UpdateFineTuningQuestionHandler,
        delete_fine_tuning_question: DeleteFineTuningQuestionHandler,
    ) -> DashboardHandlers:
        return DashboardHandlers(
            list_bots=list_bots,
            list_templates=list_templates,
            list_fine_tuning_questions=list_fine_tuning_questions,
            list_knowledge_base=list_knowledge_base,
            list_conversations=list_conversations,
            create_bot=create_bot,
            update_bot=update_bot,
            delete_bot=delete_bot,
            reconcile_assistants=reconcile_assistants,
            issue_bot_api_key=issue_bot_api_key,
            create_template=create_template,
            update_template=update_template,
            delete_template=delete_template,
            create_knowledge_base_item=create_knowledge_base_item,
            update_knowledge_base_item=update_knowledge_base_item,
            delete_knowledge_base_item=delete_knowledge_base_item,
            create_fine_tuning_question=create_fine_tuning_question,
            update_fine_tuning_question=update_fine_tuning_question,
            delete_fine_tuning_question=delete_fine_tuning_question,
        )

    @provide
    def get_store_registry(self, handlers: DashboardHandlers) -> StoreRegistry:
        return StoreRegistry(handlers)
