"""
Create Fine-Tuning Question Command.

1. Insert the question row (no association data on it)
2. Insert one join row per requested bot (failures logged, not surfaced)
3. Re-read the join rows for the canonical bot_ids
"""

import logging
from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.interfaces import Command, CommandHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.application.commands.fine_tuning._associations import (
    link_bots,
    with_persisted_bot_ids,
)
from emailbots.application.dto.fine_tuning import FineTuningQuestionCreate
from emailbots.domain.entities.fine_tuning_question import FineTuningQuestion
from emailbots.domain.ports.repositories import (
    BotQuestionLinkRepository,
    FineTuningQuestionRepository,
)
from emailbots.domain.value_objects.string_set import unique_strings
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateFineTuningQuestionCommand(Command[ServiceResult[FineTuningQuestion]]):
    user_id: Optional[UserId]
    payload: FineTuningQuestionCreate


class CreateFineTuningQuestionHandler(CommandHandler[ServiceResult[FineTuningQuestion]]):
    def __init__(
        self,
        question_repository: FineTuningQuestionRepository,
        link_repository: BotQuestionLinkRepository,
    ):
        self._questions = question_repository
        self._links = link_repository

    async def execute(
        self, command: CreateFineTuningQuestionCommand
    ) -> ServiceResult[FineTuningQuestion]:
        payload = command.payload
        try:
            user_id = require_identity(command.user_id, "create a fine-tuning question")
            question = await self._questions.create(
                user_id,
                {
                    "question": payload.question,
                    "expected_answer": payload.expected_answer,
                    "category": payload.category,
                    "difficulty": payload.difficulty,
                    "tags": unique_strings(payload.tags),
                    "is_active": payload.is_active,
                },
            )
        except SERVICE_ERRORS as e:
            logger.warning(f"[FINE_TUNING] Create failed: {e}")
            return ServiceResult.from_exception(e)

        await link_bots(self._links, question.id, unique_strings(payload.bot_ids))
        return ServiceResult.ok(await with_persisted_bot_ids(self._links, question))
