import os

# Must be set before emailbots.config.settings is imported
os.environ.setdefault("SERVICE_AUTH_SECRET", "test-secret")

import asyncio
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

import pytest
from dishka import Provider, Scope, make_async_container, provide
from fastapi.testclient import TestClient

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
    ListBotsHandler,
    ListConversationsHandler,
    ListFineTuningQuestionsHandler,
    ListKnowledgeBaseHandler,
    ListTemplatesHandler,
)
from emailbots.application.store import DashboardHandlers, DashboardStore
from emailbots.domain.entities import (
    AssistantStatus,
    Bot,
    Conversation,
    EmailTemplate,
    FineTuningQuestion,
    KnowledgeBaseItem,
)
from emailbots.domain.exceptions import (
    GatewayConflictError,
    GatewayError,
    ProvisioningError,
)
from emailbots.domain.ports import AssistantProvisioner, AssistantRef
from emailbots.domain.ports.repositories import (
    BotQuestionLinkRepository,
    BotRepository,
    ConversationRepository,
    FineTuningQuestionRepository,
    KnowledgeBaseRepository,
    TemplateRepository,
)
from emailbots.domain.value_objects import UserId
from emailbots.infrastructure.auth import StaticSessionProvider, issue_session_token

USER_ID = UserId("0f8fad5b-d9cb-469f-a165-70867728950e")
OTHER_USER_ID = UserId("7c9e6679-7425-40de-944b-e07fc1f90ae7")


# ---------------------------------------------------------------------------
# In-memory Gateway
# ---------------------------------------------------------------------------


class _FaultInjection:
    """fail_on("create") makes every create raise; ids= limits it to those rows."""

    table = "table"

    def __init__(self):
        self._faults: dict[str, tuple[Exception, Optional[set[str]]]] = {}
        self.calls: list[tuple[str, Any]] = []

    def fail_on(self, method: str, exc: Optional[Exception] = None, ids: Iterable[str] = None):
        error = exc or GatewayError("connection reset by peer", table=self.table)
        self._faults[method] = (error, set(ids) if ids is not None else None)

    def clear_faults(self):
        self._faults.clear()

    def _check(self, method: str, row_id: Optional[str] = None):
        self.calls.append((method, row_id))
        fault = self._faults.get(method)
        if fault is None:
            return
        exc, ids = fault
        if ids is None or row_id in ids:
            raise exc


def _tuples(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {k: tuple(v) if isinstance(v, list) else v for k, v in fields.items()}


def _new_id() -> str:
    return str(uuid.uuid4())


class FakeBotRepository(_FaultInjection, BotRepository):
    table = "bots"

    def __init__(self):
        super().__init__()
        self.rows: dict[str, Bot] = {}
        self.api_key_hashes: dict[str, str] = {}

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        return any(
            b.email_address == email and b.id != exclude_id for b in self.rows.values()
        )

    def _store(self, bot_id: str, fields: Mapping[str, Any]) -> dict[str, Any]:
        fields = dict(fields)
        key_hash = fields.pop("api_key_hash", None)
        if key_hash is not None:
            self.api_key_hashes[bot_id] = key_hash
        return fields

    async def list_for_creator(self, user_id):
        self._check("list_for_creator")
        return [b for b in self.rows.values() if b.created_by == user_id.value]

    async def get_by_id(self, bot_id):
        self._check("get_by_id", bot_id)
        return self.rows.get(bot_id)

    async def find_by_email(self, email_address, exclude_id=None):
        self._check("find_by_email")
        return next(
            (
                b
                for b in self.rows.values()
                if b.email_address == email_address and b.id != exclude_id
            ),
            None,
        )

    async def list_pending_assistants(self, user_id):
        self._check("list_pending_assistants")
        return [
            b
            for b in self.rows.values()
            if b.created_by == user_id.value and b.assistant_status == AssistantStatus.PENDING
        ]

    async def create(self, created_by, fields):
        self._check("create")
        bot_id = _new_id()
        fields = self._store(bot_id, fields)
        if self._email_taken(fields["email_address"]):
            raise GatewayConflictError(table=self.table, field="email_address")
        bot = Bot(
            id=bot_id,
            created_at=datetime.now(timezone.utc),
            created_by=created_by.value,
            **_tuples(fields),
        )
        self.rows[bot_id] = bot
        return bot

    async def update(self, bot_id, fields):
        self._check("update", bot_id)
        if bot_id not in self.rows:
            return None
        fields = self._store(bot_id, fields)
        email = fields.get("email_address")
        if email is not None and self._email_taken(email, exclude_id=bot_id):
            raise GatewayConflictError(table=self.table, field="email_address")
        bot = replace(self.rows[bot_id], **_tuples(fields))
        self.rows[bot_id] = bot
        return bot

    async def delete(self, bot_id):
        self._check("delete", bot_id)
        return self.rows.pop(bot_id, None) is not None

    async def activate_assistant(self, bot_id, fields):
        self._check("activate_assistant", bot_id)
        bot = self.rows.get(bot_id)
        if bot is None or bot.assistant_status != AssistantStatus.PENDING:
            return None
        bot = replace(bot, **_tuples(self._store(bot_id, fields)))
        self.rows[bot_id] = bot
        return bot

    async def get_api_key_hash(self, bot_id):
        self._check("get_api_key_hash", bot_id)
        return self.api_key_hashes.get(bot_id) if bot_id in self.rows else None


class FakeTemplateRepository(_FaultInjection, TemplateRepository):
    table = "templates"

    def __init__(self):
        super().__init__()
        self.rows: dict[str, EmailTemplate] = {}

    async def list_for_creator(self, user_id):
        self._check("list_for_creator")
        return [t for t in self.rows.values() if t.created_by == user_id.value]

    async def get_by_id(self, template_id):
        self._check("get_by_id", template_id)
        return self.rows.get(template_id)

    async def create(self, created_by, fields):
        self._check("create")
        template = EmailTemplate(id=_new_id(), created_by=created_by.value, **_tuples(fields))
        self.rows[template.id] = template
        return template

    async def update(self, template_id, fields):
        self._check("update", template_id)
        if template_id not in self.rows:
            return None
        template = replace(self.rows[template_id], **_tuples(fields))
        self.rows[template_id] = template
        return template

    async def delete(self, template_id):
        self._check("delete", template_id)
        return self.rows.pop(template_id, None) is not None


class FakeKnowledgeBaseRepository(_FaultInjection, KnowledgeBaseRepository):
    table = "knowledge_base"

    def __init__(self):
        super().__init__()
        self.rows: dict[str, KnowledgeBaseItem] = {}
        # Skip the uniqueness pre-check lookups (simulates a racing writer)
        self.hide_from_lookup = False

    def _source_taken(self, source: str, exclude_id: Optional[str] = None) -> bool:
        return any(i.source == source and i.id != exclude_id for i in self.rows.values())

    async def list_for_creator(self, user_id):
        self._check("list_for_creator")
        return [i for i in self.rows.values() if i.created_by == user_id.value]

    async def get_by_id(self, item_id):
        self._check("get_by_id", item_id)
        return self.rows.get(item_id)

    async def find_by_source(self, source, exclude_id=None):
        self._check("find_by_source")
        if self.hide_from_lookup:
            return None
        return next(
            (i for i in self.rows.values() if i.source == source and i.id != exclude_id),
            None,
        )

    async def create(self, created_by, fields):
        self._check("create")
        if self._source_taken(fields["source"]):
            raise GatewayConflictError(table=self.table, field="source")
        item = KnowledgeBaseItem(id=_new_id(), created_by=created_by.value, **_tuples(fields))
        self.rows[item.id] = item
        return item

    async def update(self, item_id, fields):
        self._check("update", item_id)
        if item_id not in self.rows:
            return None
        if "source" in fields and self._source_taken(fields["source"], exclude_id=item_id):
            raise GatewayConflictError(table=self.table, field="source")
        item = replace(self.rows[item_id], **_tuples(fields))
        self.rows[item_id] = item
        return item

    async def delete(self, item_id):
        self._check("delete", item_id)
        return self.rows.pop(item_id, None) is not None


class FakeFineTuningQuestionRepository(_FaultInjection, FineTuningQuestionRepository):
    table = "fine_tuning_questions"

    def __init__(self):
        super().__init__()
        self.rows: dict[str, FineTuningQuestion] = {}

    async def list_for_creator(self, user_id):
        self._check("list_for_creator")
        return [q for q in self.rows.values() if q.created_by == user_id.value]

    async def get_by_id(self, question_id):
        self._check("get_by_id", question_id)
        return self.rows.get(question_id)

    async def create(self, created_by, fields):
        self._check("create")
        question = FineTuningQuestion(
            id=_new_id(),
            created_at=datetime.now(timezone.utc),
            created_by=created_by.value,
            **_tuples(fields),
        )
        self.rows[question.id] = question
        return question

    async def update(self, question_id, fields):
        self._check("update", question_id)
        if question_id not in self.rows:
            return None
        question = replace(self.rows[question_id], **_tuples(fields))
        self.rows[question_id] = question
        return question

    async def delete(self, question_id):
        self._check("delete", question_id)
        return self.rows.pop(question_id, None) is not None


class FakeBotQuestionLinkRepository(_FaultInjection, BotQuestionLinkRepository):
    table = "bot_fine_tuning_questions"

    def __init__(self):
        super().__init__()
        self.links: set[tuple[str, str]] = set()

    async def bot_ids_for(self, question_id):
        self._check("bot_ids_for", question_id)
        return sorted(b for q, b in self.links if q == question_id)

    async def bot_ids_by_question(self, question_ids):
        self._check("bot_ids_by_question")
        wanted = set(question_ids)
        grouped: dict[str, list[str]] = {}
        for q, b in sorted(self.links):
            if q in wanted:
                grouped.setdefault(q, []).append(b)
        return grouped

    async def add_links(self, question_id, bot_ids):
        self._check("add_links", question_id)
        for bot_id in bot_ids:
            self.links.add((question_id, bot_id))

    async def remove_all(self, question_id):
        self._check("remove_all", question_id)
        doomed = {link for link in self.links if link[0] == question_id}
        self.links -= doomed
        return len(doomed)


class FakeConversationRepository(_FaultInjection, ConversationRepository):
    table = "conversations"

    def __init__(self, bots: FakeBotRepository):
        super().__init__()
        self._bots = bots
        self.rows: list[Conversation] = []

    async def list_for_bot_owner(self, user_id):
        self._check("list_for_bot_owner")
        owned = {b.id for b in self._bots.rows.values() if b.created_by == user_id.value}
        return [c for c in self.rows if c.bot_id in owned]


class FakeAssistantProvisioner(_FaultInjection, AssistantProvisioner):
    table = "assistants"

    def __init__(self):
        super().__init__()
        self.assistants: dict[str, dict[str, Any]] = {}
        # Seconds each create waits, to let concurrent callers overlap
        self.latency = 0.0
        self.created: list[str] = []

    def fail_on(self, method, exc=None, ids=None):
        super().fail_on(method, exc or ProvisioningError("Assistant provider unavailable"), ids)

    async def create(self, name, description, instructions, model):
        self._check("create")
        if self.latency:
            await asyncio.sleep(self.latency)
        assistant_id = f"asst_{uuid.uuid4().hex[:24]}"
        self.created.append(assistant_id)
        self.assistants[assistant_id] = {
            "name": name,
            "description": description,
            "instructions": instructions,
            "model": model,
        }
        return AssistantRef(assistant_id=assistant_id, model=model)

    async def update(self, assistant_id, name=None, description=None, instructions=None, model=None):
        self._check("update", assistant_id)
        current = self.assistants[assistant_id]
        changes = {
            "name": name,
            "description": description,
            "instructions": instructions,
            "model": model,
        }
        current.update({k: v for k, v in changes.items() if v is not None})
        return AssistantRef(assistant_id=assistant_id, model=current["model"])

    async def delete(self, assistant_id):
        self._check("delete", assistant_id)
        self.assistants.pop(assistant_id, None)


class FakeGateway:
    """Every table plus the assistant provider, shared by one test."""

    def __init__(self):
        self.bots = FakeBotRepository()
        self.templates = FakeTemplateRepository()
        self.knowledge_base = FakeKnowledgeBaseRepository()
        self.questions = FakeFineTuningQuestionRepository()
        self.links = FakeBotQuestionLinkRepository()
        self.conversations = FakeConversationRepository(self.bots)
        self.provisioner = FakeAssistantProvisioner()


def build_handlers(gateway: FakeGateway, task_runner: Optional[BackgroundTaskRunner] = None):
    provision = ProvisionAssistantHandler(gateway.bots, gateway.provisioner)
    return DashboardHandlers(
        list_bots=ListBotsHandler(gateway.bots),
        list_templates=ListTemplatesHandler(gateway.templates),
        list_fine_tuning_questions=ListFineTuningQuestionsHandler(gateway.questions, gateway.links),
        list_knowledge_base=ListKnowledgeBaseHandler(gateway.knowledge_base),
        list_conversations=ListConversationsHandler(gateway.conversations),
        create_bot=CreateBotHandler(gateway.bots, provision, task_runner),
        update_bot=UpdateBotHandler(gateway.bots, gateway.provisioner),
        delete_bot=DeleteBotHandler(gateway.bots, gateway.provisioner),
        reconcile_assistants=ReconcilePendingAssistantsHandler(gateway.bots, provision),
        issue_bot_api_key=IssueBotApiKeyHandler(gateway.bots),
        create_template=CreateTemplateHandler(gateway.templates),
        update_template=UpdateTemplateHandler(gateway.templates),
        delete_template=DeleteTemplateHandler(gateway.templates),
        create_knowledge_base_item=CreateKnowledgeBaseItemHandler(gateway.knowledge_base),
        update_knowledge_base_item=UpdateKnowledgeBaseItemHandler(gateway.knowledge_base),
        delete_knowledge_base_item=DeleteKnowledgeBaseItemHandler(gateway.knowledge_base),
        create_fine_tuning_question=CreateFineTuningQuestionHandler(gateway.questions, gateway.links),
        update_fine_tuning_question=UpdateFineTuningQuestionHandler(gateway.questions, gateway.links),
        delete_fine_tuning_question=DeleteFineTuningQuestionHandler(gateway.questions, gateway.links),
    )


class FakeInfrastructureProvider(Provider):
    """Stands in for the Prisma/OpenAI provider in API tests."""

    scope = Scope.APP

    def __init__(self, gateway: FakeGateway):
        super().__init__()
        self._gateway = gateway

    @provide
    def get_bot_repository(self) -> BotRepository:
        return self._gateway.bots

    @provide
    def get_template_repository(self) -> TemplateRepository:
        return self._gateway.templates

    @provide
    def get_knowledge_base_repository(self) -> KnowledgeBaseRepository:
        return self._gateway.knowledge_base

    @provide
    def get_question_repository(self) -> FineTuningQuestionRepository:
        return self._gateway.questions

    @provide
    def get_link_repository(self) -> BotQuestionLinkRepository:
        return self._gateway.links

    @provide
    def get_conversation_repository(self) -> ConversationRepository:
        return self._gateway.conversations

    @provide
    def get_provisioner(self) -> AssistantProvisioner:
        return self._gateway.provisioner


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
async def task_runner():
    runner = BackgroundTaskRunner()
    yield runner
    await runner.join()


@pytest.fixture()
def session():
    return StaticSessionProvider(USER_ID)


@pytest.fixture()
def handlers(gateway, task_runner):
    return build_handlers(gateway, task_runner)


@pytest.fixture()
def store(session, handlers):
    return DashboardStore(session, handlers)


@pytest.fixture()
def app(gateway):
    """FastAPI app wired to the in-memory gateway."""
    from emailbots.fastapi_app import create_fastapi_app
    from emailbots.setup.ioc.providers import AppProvider

    container = make_async_container(FakeInfrastructureProvider(gateway), AppProvider())
    return create_fastapi_app(container)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    """Authentication headers with a valid session token."""
    return {"Authorization": f"Bearer {issue_session_token(USER_ID)}"}
