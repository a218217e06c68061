"""
Unit tests for fine-tuning questions and their bot associations.

Run with: pytest tests/test_fine_tuning.py -v
"""

from emailbots.application.commands.fine_tuning import (
    CreateFineTuningQuestionCommand,
    DeleteFineTuningQuestionCommand,
    UpdateFineTuningQuestionCommand,
)
from emailbots.application.dto import FineTuningQuestionCreate, FineTuningQuestionUpdate
from emailbots.application.queries import ListFineTuningQuestionsQuery
from emailbots.domain.entities import Difficulty

from conftest import USER_ID


def _payload(**kw):
    data = {
        "question": "How do I reset my password?",
        "expected_answer": "Use the 'Forgot password' link on the sign-in page.",
        "category": "account",
        "difficulty": "easy",
    }
    data.update(kw)
    return FineTuningQuestionCreate(**data)


async def _create(handlers, **kw):
    result = await handlers.create_fine_tuning_question.execute(
        CreateFineTuningQuestionCommand(USER_ID, _payload(**kw))
    )
    assert result.success, result.error
    return result.data


class TestCreateQuestion:
    async def test_associations_round_trip(self, handlers):
        question = await _create(handlers, bot_ids=["bot-a", "bot-b"])

        listed = await handlers.list_fine_tuning_questions.execute(
            ListFineTuningQuestionsQuery(USER_ID)
        )

        assert set(question.bot_ids) == {"bot-a", "bot-b"}
        assert set(listed.data[0].bot_ids) == {"bot-a", "bot-b"}
        assert question.difficulty == Difficulty.EASY

    async def test_join_failure_is_swallowed(self, handlers, gateway):
        gateway.links.fail_on("add_links")

        question = await _create(handlers, bot_ids=["bot-a"])

        assert question.id in gateway.questions.rows
        assert question.bot_ids == ()

    async def test_bot_ids_come_from_persisted_rows(self, handlers, gateway):
        gateway.links.fail_on("bot_ids_for")

        question = await _create(handlers, bot_ids=["bot-a"])

        # Re-read failed, so nothing is echoed from the input
        assert question.bot_ids == ()
        assert {b for _, b in gateway.links.links} == {"bot-a"}

    async def test_question_row_failure_is_surfaced(self, handlers, gateway):
        gateway.questions.fail_on("create")

        result = await handlers.create_fine_tuning_question.execute(
            CreateFineTuningQuestionCommand(USER_ID, _payload(bot_ids=["bot-a"]))
        )

        assert result.error_code == "gateway_error"
        assert gateway.links.links == set()


class TestUpdateQuestion:
    async def test_empty_bot_ids_clears_associations(self, handlers, gateway):
        question = await _create(handlers, bot_ids=["bot-a", "bot-b"])

        result = await handlers.update_fine_tuning_question.execute(
            UpdateFineTuningQuestionCommand(USER_ID, question.id, FineTuningQuestionUpdate(bot_ids=[]))
        )

        assert result.data.bot_ids == ()
        assert gateway.links.links == set()
        assert [m for m, _ in gateway.links.calls].count("add_links") == 1

    async def test_bot_ids_replace_the_whole_set(self, handlers):
        question = await _create(handlers, bot_ids=["bot-a", "bot-b"])

        result = await handlers.update_fine_tuning_question.execute(
            UpdateFineTuningQuestionCommand(
                USER_ID, question.id, FineTuningQuestionUpdate(bot_ids=["bot-c"])
            )
        )

        assert result.data.bot_ids == ("bot-c",)

    async def test_omitted_bot_ids_leave_associations_alone(self, handlers, gateway):
        question = await _create(handlers, bot_ids=["bot-a"])

        result = await handlers.update_fine_tuning_question.execute(
            UpdateFineTuningQuestionCommand(
                USER_ID, question.id, FineTuningQuestionUpdate(category="billing")
            )
        )

        assert result.data.category == "billing"
        assert result.data.bot_ids == ("bot-a",)
        assert "remove_all" not in [m for m, _ in gateway.links.calls]

    async def test_success_rate_and_last_used_can_be_cleared(self, handlers):
        question = await _create(handlers)
        await handlers.update_fine_tuning_question.execute(
            UpdateFineTuningQuestionCommand(
                USER_ID, question.id, FineTuningQuestionUpdate(success_rate=80)
            )
        )

        result = await handlers.update_fine_tuning_question.execute(
            UpdateFineTuningQuestionCommand(
                USER_ID, question.id, FineTuningQuestionUpdate(success_rate=None)
            )
        )

        assert result.data.success_rate is None

    async def test_update_missing_question(self, handlers):
        result = await handlers.update_fine_tuning_question.execute(
            UpdateFineTuningQuestionCommand(USER_ID, "nope", FineTuningQuestionUpdate(category="x"))
        )

        assert result.error == "Fine-tuning question not found"


class TestDeleteQuestion:
    async def test_delete_removes_join_rows_first(self, handlers, gateway):
        question = await _create(handlers, bot_ids=["bot-a"])

        result = await handlers.delete_fine_tuning_question.execute(
            DeleteFineTuningQuestionCommand(USER_ID, question.id)
        )

        assert result.success
        assert gateway.questions.rows == {}
        assert gateway.links.links == set()

    async def test_join_cleanup_failure_does_not_block_delete(self, handlers, gateway):
        question = await _create(handlers, bot_ids=["bot-a"])
        gateway.links.fail_on("remove_all")

        result = await handlers.delete_fine_tuning_question.execute(
            DeleteFineTuningQuestionCommand(USER_ID, question.id)
        )

        assert result.success
        assert gateway.questions.rows == {}
