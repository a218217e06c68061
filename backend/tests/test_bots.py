"""
Unit tests for the bot command handlers and assistant provisioning.

Run with: pytest tests/test_bots.py -v
"""

import asyncio

from emailbots.application.commands.bots import (
    CreateBotCommand,
    DeleteBotCommand,
    IssueBotApiKeyCommand,
    ProvisionAssistantCommand,
    ProvisionAssistantHandler,
    ReconcilePendingAssistantsCommand,
    UpdateBotCommand,
)
from emailbots.application.dto import BotCreate, BotUpdate
from emailbots.application.queries import AuthenticateBotHandler, AuthenticateBotQuery
from emailbots.domain.entities import AssistantStatus, BotStatus
from emailbots.domain.exceptions import GatewayConflictError

from conftest import OTHER_USER_ID, USER_ID


def _create(name="Support", email="support@x.com", **extra):
    return BotCreate(name=name, email_address=email, **extra)


class TestCreateBot:
    async def test_create_applies_defaults(self, handlers, gateway):
        result = await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))

        assert result.success
        bot = result.data
        assert bot.status == BotStatus.ACTIVE
        assert bot.total_emails == 0
        assert bot.response_rate == 100
        assert bot.assistant_status == AssistantStatus.PENDING
        assert bot.forward_email_display == "Forward your emails here"
        assert bot.created_by == USER_ID.value
        assert bot.id in gateway.bots.rows

    async def test_create_requires_identity(self, handlers, gateway):
        result = await handlers.create_bot.execute(CreateBotCommand(None, _create()))

        assert not result.success
        assert result.error_code == "unauthenticated"
        assert result.error == "Please sign in to create a bot"
        assert gateway.bots.rows == {}

    async def test_duplicate_email_inserts_nothing(self, handlers, gateway):
        await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))
        result = await handlers.create_bot.execute(
            CreateBotCommand(USER_ID, _create(name="Other"))
        )

        assert not result.success
        assert result.error_code == "duplicate_email"
        assert "support@x.com" in result.error
        assert len(gateway.bots.rows) == 1
        assert [m for m, _ in gateway.bots.calls].count("create") == 1

    async def test_constraint_conflict_maps_to_duplicate_email(self, handlers, gateway):
        gateway.bots.fail_on("create", GatewayConflictError(table="bots", field="email_address"))

        result = await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))

        assert result.error_code == "duplicate_email"

    async def test_gateway_error_passes_message_through(self, handlers, gateway):
        gateway.bots.fail_on("create")

        result = await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))

        assert result.error_code == "gateway_error"
        assert result.error == "connection reset by peer"

    async def test_response_time_is_not_persisted(self, handlers):
        result = await handlers.create_bot.execute(
            CreateBotCommand(USER_ID, _create(response_time="< 5 minutes"))
        )

        assert result.success
        assert not hasattr(result.data, "response_time")


class TestProvisioning:
    async def test_create_provisions_assistant_in_background(self, handlers, gateway, task_runner):
        result = await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))
        await task_runner.join()

        stored = gateway.bots.rows[result.data.id]
        assert stored.assistant_status == AssistantStatus.ACTIVE
        assert stored.assistant_id in gateway.provisioner.assistants
        assert stored.id not in gateway.bots.api_key_hashes

    async def test_provider_failure_does_not_fail_create(self, handlers, gateway, task_runner):
        gateway.provisioner.fail_on("create")

        result = await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))
        await task_runner.join()

        assert result.success
        stored = gateway.bots.rows[result.data.id]
        assert stored.assistant_status == AssistantStatus.PENDING
        assert stored.assistant_id is None

    async def test_provision_is_idempotent(self, gateway):
        handler = ProvisionAssistantHandler(gateway.bots, gateway.provisioner, model="gpt-test")
        bot = await gateway.bots.create(
            USER_ID,
            {
                "name": "Support",
                "email_address": "support@x.com",
                "status": BotStatus.ACTIVE,
                "total_emails": 0,
                "response_rate": 100,
            },
        )

        first = await handler.execute(ProvisionAssistantCommand(bot.id))
        second = await handler.execute(ProvisionAssistantCommand(bot.id))

        assert first.data.assistant_model == "gpt-test"
        assert second.data.assistant_id == first.data.assistant_id
        assert len(gateway.provisioner.assistants) == 1

    async def test_deleted_bot_discards_new_assistant(self, gateway):
        handler = ProvisionAssistantHandler(gateway.bots, gateway.provisioner)
        bot = await gateway.bots.create(
            USER_ID,
            {
                "name": "Support",
                "email_address": "support@x.com",
                "status": BotStatus.ACTIVE,
                "total_emails": 0,
                "response_rate": 100,
            },
        )
        original_activate = gateway.bots.activate_assistant

        async def activate_after_delete(bot_id, fields):
            # Row vanishes between the provider call and the activation
            gateway.bots.rows.pop(bot_id, None)
            return await original_activate(bot_id, fields)

        gateway.bots.activate_assistant = activate_after_delete

        result = await handler.execute(ProvisionAssistantCommand(bot.id))

        assert result.error_code == "not_found"
        assert gateway.provisioner.assistants == {}

    async def test_reconcile_provisions_pending_bots(self, handlers, gateway, task_runner):
        gateway.provisioner.fail_on("create")
        for i in range(2):
            await handlers.create_bot.execute(
                CreateBotCommand(USER_ID, _create(name=f"Bot {i}", email=f"bot{i}@x.com"))
            )
        await task_runner.join()
        gateway.provisioner.clear_faults()

        result = await handlers.reconcile_assistants.execute(
            ReconcilePendingAssistantsCommand(USER_ID)
        )

        assert result.success
        assert len(result.data.provisioned) == 2
        assert result.data.failed == {}
        assert all(b.assistant_status == AssistantStatus.ACTIVE for b in gateway.bots.rows.values())

    async def test_reconcile_reports_failures_per_bot(self, handlers, gateway, task_runner):
        gateway.provisioner.fail_on("create")
        created = await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))
        await task_runner.join()

        result = await handlers.reconcile_assistants.execute(
            ReconcilePendingAssistantsCommand(USER_ID)
        )

        assert result.data.provisioned == []
        assert result.data.failed == {created.data.id: "Assistant provider unavailable"}


    async def test_sweep_during_background_run_creates_one_assistant(
        self, handlers, gateway, task_runner
    ):
        gateway.provisioner.latency = 0.01
        created = await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))

        # Background task is still waiting on the provider when the sweep starts
        result = await handlers.reconcile_assistants.execute(
            ReconcilePendingAssistantsCommand(USER_ID)
        )
        await task_runner.join()

        stored = gateway.bots.rows[created.data.id]
        assert len(gateway.provisioner.created) == 1
        assert list(gateway.provisioner.assistants) == [stored.assistant_id]
        assert result.data.provisioned == [created.data.id]

    async def test_losing_writer_deletes_its_assistant(self, gateway):
        # Two handlers share no lock, like two server processes
        gateway.provisioner.latency = 0.01
        first = ProvisionAssistantHandler(gateway.bots, gateway.provisioner)
        second = ProvisionAssistantHandler(gateway.bots, gateway.provisioner)
        bot = await gateway.bots.create(
            USER_ID,
            {
                "name": "Support",
                "email_address": "support@x.com",
                "status": BotStatus.ACTIVE,
                "total_emails": 0,
                "response_rate": 100,
            },
        )

        results = await asyncio.gather(
            first.execute(ProvisionAssistantCommand(bot.id)),
            second.execute(ProvisionAssistantCommand(bot.id)),
        )

        stored = gateway.bots.rows[bot.id]
        assert all(r.success for r in results)
        assert {r.data.assistant_id for r in results} == {stored.assistant_id}
        assert len(gateway.provisioner.created) == 2
        assert list(gateway.provisioner.assistants) == [stored.assistant_id]

    async def test_failed_activation_deletes_assistant(self, handlers, gateway, task_runner):
        gateway.bots.fail_on("activate_assistant")

        created = await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))
        await task_runner.join()

        assert gateway.bots.rows[created.data.id].assistant_status == AssistantStatus.PENDING
        assert len(gateway.provisioner.created) == 1
        assert gateway.provisioner.assistants == {}


class TestUpdateBot:
    async def _bot(self, handlers, **kw):
        return (await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create(**kw)))).data

    async def test_update_writes_only_supplied_fields(self, handlers, gateway):
        bot = await self._bot(handlers, description="Answers support mail")

        result = await handlers.update_bot.execute(
            UpdateBotCommand(USER_ID, bot.id, BotUpdate(name="Helpdesk"))
        )

        assert result.data.name == "Helpdesk"
        assert result.data.description == "Answers support mail"

    async def test_update_to_taken_email_fails(self, handlers):
        first = await self._bot(handlers)
        second = await self._bot(handlers, name="Sales", email="sales@x.com")

        result = await handlers.update_bot.execute(
            UpdateBotCommand(USER_ID, second.id, BotUpdate(email_address=first.email_address))
        )

        assert result.error_code == "duplicate_email"

    async def test_keeping_own_email_is_not_a_duplicate(self, handlers):
        bot = await self._bot(handlers)

        result = await handlers.update_bot.execute(
            UpdateBotCommand(USER_ID, bot.id, BotUpdate(email_address=bot.email_address, name="X"))
        )

        assert result.success

    async def test_forward_address_can_be_cleared(self, handlers):
        bot = await self._bot(handlers, forward_email_address="humans@x.com")

        result = await handlers.update_bot.execute(
            UpdateBotCommand(USER_ID, bot.id, BotUpdate(forward_email_address=None))
        )

        assert result.data.forward_email_address is None

    async def test_unknown_or_foreign_bot_is_not_found(self, handlers):
        bot = await self._bot(handlers)

        missing = await handlers.update_bot.execute(
            UpdateBotCommand(USER_ID, "nope", BotUpdate(name="X"))
        )
        foreign = await handlers.update_bot.execute(
            UpdateBotCommand(OTHER_USER_ID, bot.id, BotUpdate(name="X"))
        )

        assert missing.error_code == "not_found"
        assert foreign.error_code == "not_found"

    async def test_rename_is_pushed_to_assistant(self, handlers, gateway, task_runner):
        bot = await self._bot(handlers)
        await task_runner.join()

        result = await handlers.update_bot.execute(
            UpdateBotCommand(USER_ID, bot.id, BotUpdate(name="Helpdesk"))
        )

        assistant = gateway.provisioner.assistants[result.data.assistant_id]
        assert assistant["name"] == "Helpdesk"

    async def test_assistant_sync_failure_is_not_surfaced(self, handlers, gateway, task_runner):
        bot = await self._bot(handlers)
        await task_runner.join()
        gateway.provisioner.fail_on("update")

        result = await handlers.update_bot.execute(
            UpdateBotCommand(USER_ID, bot.id, BotUpdate(name="Helpdesk"))
        )

        assert result.success


class TestDeleteBot:
    async def test_delete_removes_row_and_assistant(self, handlers, gateway, task_runner):
        bot = (await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))).data
        await task_runner.join()

        result = await handlers.delete_bot.execute(DeleteBotCommand(USER_ID, bot.id))

        assert result.data == bot.id
        assert gateway.bots.rows == {}
        assert gateway.provisioner.assistants == {}

    async def test_delete_missing_bot(self, handlers):
        result = await handlers.delete_bot.execute(DeleteBotCommand(USER_ID, "nope"))

        assert result.error_code == "not_found"
        assert result.error == "Bot not found"

    async def test_delete_requires_identity(self, handlers):
        result = await handlers.delete_bot.execute(DeleteBotCommand(None, "whatever"))

        assert result.error == "Please sign in to delete a bot"


class TestApiKeys:
    async def _bot(self, handlers):
        return (await handlers.create_bot.execute(CreateBotCommand(USER_ID, _create()))).data

    async def test_issued_key_is_returned_once_and_stored_hashed(self, handlers, gateway):
        bot = await self._bot(handlers)

        result = await handlers.issue_bot_api_key.execute(IssueBotApiKeyCommand(USER_ID, bot.id))

        assert result.data.bot_id == bot.id
        assert result.data.api_key.startswith("agc-")
        stored = gateway.bots.api_key_hashes[bot.id]
        assert stored.startswith("$2")
        assert result.data.api_key not in stored

    async def test_issued_key_authenticates_bot(self, handlers, gateway):
        bot = await self._bot(handlers)
        issued = (
            await handlers.issue_bot_api_key.execute(IssueBotApiKeyCommand(USER_ID, bot.id))
        ).data
        authenticate = AuthenticateBotHandler(gateway.bots)

        result = await authenticate.execute(AuthenticateBotQuery(bot.id, issued.api_key))

        assert result.success
        assert result.data.id == bot.id

    async def test_rotation_revokes_previous_key(self, handlers, gateway):
        bot = await self._bot(handlers)
        old = (await handlers.issue_bot_api_key.execute(IssueBotApiKeyCommand(USER_ID, bot.id))).data
        new = (await handlers.issue_bot_api_key.execute(IssueBotApiKeyCommand(USER_ID, bot.id))).data
        authenticate = AuthenticateBotHandler(gateway.bots)

        stale = await authenticate.execute(AuthenticateBotQuery(bot.id, old.api_key))
        fresh = await authenticate.execute(AuthenticateBotQuery(bot.id, new.api_key))

        assert stale.error_code == "unauthenticated"
        assert fresh.success

    async def test_wrong_key_or_keyless_bot_is_unauthenticated(self, handlers, gateway):
        bot = await self._bot(handlers)
        authenticate = AuthenticateBotHandler(gateway.bots)

        keyless = await authenticate.execute(AuthenticateBotQuery(bot.id, "agc-guess"))
        unknown = await authenticate.execute(AuthenticateBotQuery("nope", "agc-guess"))

        assert keyless.error == "Invalid bot API key"
        assert unknown.error_code == "unauthenticated"

    async def test_foreign_bot_key_is_not_issued(self, handlers, gateway):
        bot = await self._bot(handlers)

        result = await handlers.issue_bot_api_key.execute(
            IssueBotApiKeyCommand(OTHER_USER_ID, bot.id)
        )

        assert result.error_code == "not_found"
        assert bot.id not in gateway.bots.api_key_hashes

    async def test_issue_requires_identity(self, handlers):
        result = await handlers.issue_bot_api_key.execute(IssueBotApiKeyCommand(None, "whatever"))

        assert result.error == "Please sign in to manage bot API keys"
