"""
Dashboard Store - the single in-memory source of truth for one dashboard session.

The store owns an immutable DashboardSnapshot. Every mutation entry point
calls an entity service (command handler), and only a confirmed success
commits a *new* snapshot; nothing is applied optimistically. A failed
service call raises StoreOperationError and leaves the snapshot untouched.

Commits always build on the snapshot current at completion time, so
independent operations that finish out of order never lose each other's
changes.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

from pydantic import ValidationError

from emailbots.application.commands.bots import (
    CreateBotCommand,
    CreateBotHandler,
    DeleteBotCommand,
    DeleteBotHandler,
    IssueBotApiKeyCommand,
    IssueBotApiKeyHandler,
    IssuedApiKey,
    ReconcilePendingAssistantsCommand,
    ReconcilePendingAssistantsHandler,
    ReconcileReport,
    UpdateBotCommand,
    UpdateBotHandler,
)
from emailbots.application.commands.fine_tuning import (
    CreateFineTuningQuestionCommand,
    CreateFineTuningQuestionHandler,
    DeleteFineTuningQuestionCommand,
    DeleteFineTuningQuestionHandler,
    UpdateFineTuningQuestionCommand,
    UpdateFineTuningQuestionHandler,
)
from emailbots.application.commands.knowledge_base import (
    CreateKnowledgeBaseItemCommand,
    CreateKnowledgeBaseItemHandler,
    DeleteKnowledgeBaseItemCommand,
    DeleteKnowledgeBaseItemHandler,
    UpdateKnowledgeBaseItemCommand,
    UpdateKnowledgeBaseItemHandler,
)
from emailbots.application.commands.templates import (
    CreateTemplateCommand,
    CreateTemplateHandler,
    DeleteTemplateCommand,
    DeleteTemplateHandler,
    UpdateTemplateCommand,
    UpdateTemplateHandler,
)
from emailbots.application.common.results import ServiceResult
from emailbots.application.dto import (
    BotCreate,
    BotUpdate,
    FineTuningQuestionCreate,
    FineTuningQuestionUpdate,
    KnowledgeBaseItemCreate,
    KnowledgeBaseItemUpdate,
    TemplateCreate,
    TemplateUpdate,
)
from emailbots.application.queries import (
    ListBotsHandler,
    ListBotsQuery,
    ListConversationsHandler,
    ListConversationsQuery,
    ListFineTuningQuestionsHandler,
    ListFineTuningQuestionsQuery,
    ListKnowledgeBaseHandler,
    ListKnowledgeBaseQuery,
    ListTemplatesHandler,
    ListTemplatesQuery,
)
from emailbots.application.settings import (
    Settings,
    default_settings,
    merge_settings,
    validate_settings,
)
from emailbots.application.transfer import QuestionImportRow
from emailbots.domain.entities import (
    Bot,
    Conversation,
    EmailTemplate,
    FineTuningQuestion,
    KnowledgeBaseItem,
)
from emailbots.domain.exceptions import SettingsValidationError
from emailbots.domain.ports.session_provider import SessionProvider
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[["DashboardSnapshot"], None]


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DashboardSnapshot:
    bots: tuple[Bot, ...] = ()
    templates: tuple[EmailTemplate, ...] = ()
    fine_tuning_questions: tuple[FineTuningQuestion, ...] = ()
    knowledge_base: tuple[KnowledgeBaseItem, ...] = ()
    conversations: tuple[Conversation, ...] = ()
    settings: Settings = field(default_factory=default_settings)
    is_loading: bool = False
    error: Optional[str] = None
    version: int = 0


class StoreOperationError(Exception):
    """A store mutation failed; carries the service's message and code."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or "gateway_error"


@dataclass(frozen=True)
class BatchDeleteItem:
    id: str
    success: bool
    error: Optional[str] = None
    error_code: Optional[str] = None


@dataclass(frozen=True)
class BatchDeleteResult:
    items: tuple[BatchDeleteItem, ...]

    @property
    def succeeded(self) -> list[str]:
        return [item.id for item in self.items if item.success]

    @property
    def failed(self) -> list[BatchDeleteItem]:
        return [item for item in self.items if not item.success]

    @property
    def success(self) -> bool:
        return not self.failed


class BatchDeleteError(StoreOperationError):
    """At least one item of a batch delete failed; the rest were reconciled."""

    def __init__(self, result: BatchDeleteResult):
        failed = result.failed
        super().__init__(
            f"Failed to delete {len(failed)} of {len(result.items)} questions: "
            + "; ".join(f"{item.id}: {item.error}" for item in failed),
            failed[0].error_code if failed else None,
        )
        self.result = result


@dataclass(frozen=True)
class QuestionImportOutcome:
    line: int
    success: bool
    question: Optional[FineTuningQuestion] = None
    error: Optional[str] = None


@dataclass
class DashboardHandlers:
    """Every entity service the store drives, bundled for injection."""

    list_bots: ListBotsHandler
    list_templates: ListTemplatesHandler
    list_fine_tuning_questions: ListFineTuningQuestionsHandler
    list_knowledge_base: ListKnowledgeBaseHandler
    list_conversations: ListConversationsHandler
    create_bot: CreateBotHandler
    update_bot: UpdateBotHandler
    delete_bot: DeleteBotHandler
    reconcile_assistants: ReconcilePendingAssistantsHandler
    issue_bot_api_key: IssueBotApiKeyHandler
    create_template: CreateTemplateHandler
    update_template: UpdateTemplateHandler
    delete_template: DeleteTemplateHandler
    create_knowledge_base_item: CreateKnowledgeBaseItemHandler
    update_knowledge_base_item: UpdateKnowledgeBaseItemHandler
    delete_knowledge_base_item: DeleteKnowledgeBaseItemHandler
    create_fine_tuning_question: CreateFineTuningQuestionHandler
    update_fine_tuning_question: UpdateFineTuningQuestionHandler
    delete_fine_tuning_question: DeleteFineTuningQuestionHandler


def _unwrap(result: ServiceResult[T]) -> T:
    if not result.success:
        raise StoreOperationError(result.error or "Operation failed", result.error_code)
    return result.data


def _merge_by_id(items: tuple[T, ...], entity: T) -> tuple[T, ...]:
    if any(item.id == entity.id for item in items):
        return tuple(entity if item.id == entity.id else item for item in items)
    return items + (entity,)


def _without(items: tuple[T, ...], ids: Iterable[str]) -> tuple[T, ...]:
    drop = set(ids)
    return tuple(item for item in items if item.id not in drop)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class DashboardStore:
    def __init__(
        self,
        session: SessionProvider,
        handlers: DashboardHandlers,
        settings: Optional[Settings] = None,
    ):
        self._session = session
        self._h = handlers
        self._snapshot = DashboardSnapshot(settings=settings or default_settings())
        self._listeners: list[Listener] = []

    # -- state access ------------------------------------------------------

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener after every commit. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, **changes: Any) -> DashboardSnapshot:
        self._snapshot = replace(
            self._snapshot, version=self._snapshot.version + 1, **changes
        )
        for listener in list(self._listeners):
            try:
                listener(self._snapshot)
            except Exception:
                logger.exception("[STORE] Snapshot listener failed")
        return self._snapshot

    async def _identity(self) -> Optional[UserId]:
        return await self._session.get_user_id()

    # -- bulk load ---------------------------------------------------------

    async def initialize(self) -> DashboardSnapshot:
        """
        Load all five collections concurrently. Either all of them are
        replaced at once, or (any failure) none are and the error is raised.
        """
        user_id = await self._identity()
        self._commit(is_loading=True, error=None)
        try:
            results = await asyncio.gather(
                self._h.list_bots.execute(ListBotsQuery(user_id)),
                self._h.list_templates.execute(ListTemplatesQuery(user_id)),
                self._h.list_fine_tuning_questions.execute(
                    ListFineTuningQuestionsQuery(user_id)
                ),
                self._h.list_knowledge_base.execute(ListKnowledgeBaseQuery(user_id)),
                self._h.list_conversations.execute(ListConversationsQuery(user_id)),
            )
            failed = next((r for r in results if not r.success), None)
            if failed is not None:
                logger.warning(f"[STORE] Initialize failed: {failed.error}")
                self._commit(is_loading=False, error=failed.error)
                raise StoreOperationError(failed.error or "Failed to load data", failed.error_code)

            bots, templates, questions, knowledge_base, conversations = (
                tuple(r.data) for r in results
            )
            logger.info(
                f"[STORE] Loaded {len(bots)} bots, {len(templates)} templates, "
                f"{len(questions)} questions, {len(knowledge_base)} knowledge base items, "
                f"{len(conversations)} conversations"
            )
            return self._commit(
                bots=bots,
                templates=templates,
                fine_tuning_questions=questions,
                knowledge_base=knowledge_base,
                conversations=conversations,
                is_loading=False,
                error=None,
            )
        finally:
            if self._snapshot.is_loading:
                self._commit(is_loading=False)

    # -- bots --------------------------------------------------------------

    async def add_bot(self, payload: BotCreate) -> Bot:
        result = await self._h.create_bot.execute(
            CreateBotCommand(user_id=await self._identity(), payload=payload)
        )
        bot = _unwrap(result)
        self._commit(bots=self._snapshot.bots + (bot,))
        return bot

    async def update_bot(self, bot_id: str, payload: BotUpdate) -> Bot:
        result = await self._h.update_bot.execute(
            UpdateBotCommand(user_id=await self._identity(), bot_id=bot_id, payload=payload)
        )
        bot = _unwrap(result)
        self._commit(bots=_merge_by_id(self._snapshot.bots, bot))
        return bot

    async def delete_bot(self, bot_id: str) -> None:
        result = await self._h.delete_bot.execute(
            DeleteBotCommand(user_id=await self._identity(), bot_id=bot_id)
        )
        _unwrap(result)
        # The gateway cascades a bot delete to its question links and conversations
        self._commit(
            bots=_without(self._snapshot.bots, [bot_id]),
            fine_tuning_questions=tuple(
                replace(q, bot_ids=tuple(b for b in q.bot_ids if b != bot_id))
                if bot_id in q.bot_ids
                else q
                for q in self._snapshot.fine_tuning_questions
            ),
            conversations=tuple(
                c for c in self._snapshot.conversations if c.bot_id != bot_id
            ),
        )

    async def issue_bot_api_key(self, bot_id: str) -> IssuedApiKey:
        """Issue (or rotate) a bot credential. The plaintext is only in the return value."""
        return _unwrap(
            await self._h.issue_bot_api_key.execute(
                IssueBotApiKeyCommand(user_id=await self._identity(), bot_id=bot_id)
            )
        )

    async def reconcile_assistants(self) -> ReconcileReport:
        """Retry provisioning for pending bots, then refresh the bot list."""
        user_id = await self._identity()
        report = _unwrap(
            await self._h.reconcile_assistants.execute(
                ReconcilePendingAssistantsCommand(user_id=user_id)
            )
        )
        if report.provisioned:
            bots = _unwrap(await self._h.list_bots.execute(ListBotsQuery(user_id)))
            self._commit(bots=tuple(bots))
        return report

    # -- templates ---------------------------------------------------------

    async def add_template(self, payload: TemplateCreate) -> EmailTemplate:
        result = await self._h.create_template.execute(
            CreateTemplateCommand(user_id=await self._identity(), payload=payload)
        )
        template = _unwrap(result)
        self._commit(templates=self._snapshot.templates + (template,))
        return template

    async def update_template(self, template_id: str, payload: TemplateUpdate) -> EmailTemplate:
        result = await self._h.update_template.execute(
            UpdateTemplateCommand(
                user_id=await self._identity(), template_id=template_id, payload=payload
            )
        )
        template = _unwrap(result)
        self._commit(templates=_merge_by_id(self._snapshot.templates, template))
        return template

    async def delete_template(self, template_id: str) -> None:
        result = await self._h.delete_template.execute(
            DeleteTemplateCommand(user_id=await self._identity(), template_id=template_id)
        )
        _unwrap(result)
        self._commit(templates=_without(self._snapshot.templates, [template_id]))

    # -- knowledge base ----------------------------------------------------

    async def add_knowledge_base(self, payload: KnowledgeBaseItemCreate) -> KnowledgeBaseItem:
        result = await self._h.create_knowledge_base_item.execute(
            CreateKnowledgeBaseItemCommand(user_id=await self._identity(), payload=payload)
        )
        item = _unwrap(result)
        self._commit(knowledge_base=self._snapshot.knowledge_base + (item,))
        return item

    async def update_knowledge_base(
        self, item_id: str, payload: KnowledgeBaseItemUpdate
    ) -> KnowledgeBaseItem:
        result = await self._h.update_knowledge_base_item.execute(
            UpdateKnowledgeBaseItemCommand(
                user_id=await self._identity(), item_id=item_id, payload=payload
            )
        )
        item = _unwrap(result)
        self._commit(knowledge_base=_merge_by_id(self._snapshot.knowledge_base, item))
        return item

    async def delete_knowledge_base(self, item_id: str) -> None:
        result = await self._h.delete_knowledge_base_item.execute(
            DeleteKnowledgeBaseItemCommand(user_id=await self._identity(), item_id=item_id)
        )
        _unwrap(result)
        self._commit(knowledge_base=_without(self._snapshot.knowledge_base, [item_id]))

    # -- fine-tuning questions ---------------------------------------------

    async def add_fine_tuning_question(
        self, payload: FineTuningQuestionCreate
    ) -> FineTuningQuestion:
        result = await self._h.create_fine_tuning_question.execute(
            CreateFineTuningQuestionCommand(user_id=await self._identity(), payload=payload)
        )
        question = _unwrap(result)
        self._commit(
            fine_tuning_questions=self._snapshot.fine_tuning_questions + (question,)
        )
        return question

    async def update_fine_tuning_question(
        self, question_id: str, payload: FineTuningQuestionUpdate
    ) -> FineTuningQuestion:
        result = await self._h.update_fine_tuning_question.execute(
            UpdateFineTuningQuestionCommand(
                user_id=await self._identity(), question_id=question_id, payload=payload
            )
        )
        question = _unwrap(result)
        self._commit(
            fine_tuning_questions=_merge_by_id(self._snapshot.fine_tuning_questions, question)
        )
        return question

    async def delete_fine_tuning_questions(self, ids: Iterable[str]) -> BatchDeleteResult:
        """
        Delete each question concurrently and reconcile per item: ids whose
        delete succeeded leave the snapshot, failed ids stay. Raises
        BatchDeleteError (carrying the full result) if anything failed.
        """
        ids = list(dict.fromkeys(ids))
        user_id = await self._identity()
        results = await asyncio.gather(
            *(
                self._h.delete_fine_tuning_question.execute(
                    DeleteFineTuningQuestionCommand(user_id=user_id, question_id=qid)
                )
                for qid in ids
            )
        )
        batch = BatchDeleteResult(
            items=tuple(
                BatchDeleteItem(
                    id=qid,
                    success=r.success,
                    error=r.error,
                    error_code=r.error_code,
                )
                for qid, r in zip(ids, results)
            )
        )
        if batch.succeeded:
            self._commit(
                fine_tuning_questions=_without(
                    self._snapshot.fine_tuning_questions, batch.succeeded
                )
            )
        if not batch.success:
            logger.warning(
                f"[STORE] Bulk delete: {len(batch.succeeded)} deleted, {len(batch.failed)} failed"
            )
            raise BatchDeleteError(batch)
        return batch

    async def import_fine_tuning_questions(
        self, rows: Iterable[QuestionImportRow]
    ) -> list[QuestionImportOutcome]:
        """Feed each imported row through the create path on its own."""
        outcomes = []
        for row in rows:
            try:
                question = await self.add_fine_tuning_question(row.to_create())
            except ValidationError as e:
                errors = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
                )
                outcomes.append(QuestionImportOutcome(line=row.line, success=False, error=errors))
            except StoreOperationError as e:
                outcomes.append(QuestionImportOutcome(line=row.line, success=False, error=e.message))
            else:
                outcomes.append(QuestionImportOutcome(line=row.line, success=True, question=question))

        imported = sum(1 for o in outcomes if o.success)
        logger.info(f"[STORE] Imported {imported} of {len(outcomes)} questions")
        return outcomes

    # -- settings ----------------------------------------------------------

    def update_settings(self, partial: Mapping[str, Any]) -> Settings:
        """
        Merge a partial update into the current settings and commit the
        result only if the merged full object validates.
        """
        result = validate_settings(merge_settings(self._snapshot.settings, partial))
        if not result.is_valid:
            raise SettingsValidationError(result.errors)
        self._commit(settings=result.settings)
        return result.settings

    def save_settings(self) -> Settings:
        """Settings are process-local: validate and log, nothing is persisted."""
        result = validate_settings(self._snapshot.settings)
        if not result.is_valid:
            raise SettingsValidationError(result.errors)
        logger.info(
            f"[STORE] Settings saved: {result.settings.model_dump_json(exclude={'api': {'api_key', 'webhook_secret'}})}"
        )
        return result.settings
