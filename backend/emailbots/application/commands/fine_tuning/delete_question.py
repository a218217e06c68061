"""
Delete Fine-Tuning Question Command.

Join rows go first (best-effort); the question row delete decides the
outcome.
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
from emailbots.application.commands.fine_tuning._associations import unlink_all
from emailbots.domain.exceptions import EntityNotFoundError
from emailbots.domain.ports.repositories import (
    BotQuestionLinkRepository,
    FineTuningQuestionRepository,
)
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteFineTuningQuestionCommand(Command[ServiceResult[str]]):
    user_id: Optional[UserId]
    question_id: str


class DeleteFineTuningQuestionHandler(CommandHandler[ServiceResult[str]]):
    def __init__(
        self,
        question_repository: FineTuningQuestionRepository,
        link_repository: BotQuestionLinkRepository,
    ):
        self._questions = question_repository
        self._links = link_repository

    async def execute(self, command: DeleteFineTuningQuestionCommand) -> ServiceResult[str]:
        try:
            user_id = require_identity(command.user_id, "delete a fine-tuning question")

            question = await self._questions.get_by_id(command.question_id)
            if question is None or question.created_by != user_id.value:
                raise EntityNotFoundError("Fine-tuning question not found")

            await unlink_all(self._links, command.question_id)

            if not await self._questions.delete(command.question_id):
                raise EntityNotFoundError("Fine-tuning question not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[FINE_TUNING] Delete of {command.question_id} failed: {e}")
            return ServiceResult.from_exception(e)

        return ServiceResult.ok(command.question_id)
