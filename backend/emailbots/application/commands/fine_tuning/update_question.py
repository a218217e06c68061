"""
Update Fine-Tuning Question Command.

Scalar fields are merged partially. When bot_ids is present (even empty)
the association set is replaced wholesale: every join row for the question
is removed, then the new set is inserted. No merge semantics.
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
    unlink_all,
    with_persisted_bot_ids,
)
from emailbots.application.dto.fine_tuning import FineTuningQuestionUpdate
from emailbots.domain.entities.fine_tuning_question import FineTuningQuestion
from emailbots.domain.exceptions import EntityNotFoundError
from emailbots.domain.ports.repositories import (
    BotQuestionLinkRepository,
    FineTuningQuestionRepository,
)
from emailbots.domain.value_objects.string_set import unique_strings
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateFineTuningQuestionCommand(Command[ServiceResult[FineTuningQuestion]]):
    user_id: Optional[UserId]
    question_id: str
    payload: FineTuningQuestionUpdate


class UpdateFineTuningQuestionHandler(CommandHandler[ServiceResult[FineTuningQuestion]]):
    def __init__(
        self,
        question_repository: FineTuningQuestionRepository,
        link_repository: BotQuestionLinkRepository,
    ):
        self._questions = question_repository
        self._links = link_repository

    async def execute(
        self, command: UpdateFineTuningQuestionCommand
    ) -> ServiceResult[FineTuningQuestion]:
        payload = command.payload
        fields = payload.changes()
        fields.pop("bot_ids", None)
        if "tags" in fields:
            fields["tags"] = unique_strings(fields["tags"])

        try:
            user_id = require_identity(command.user_id, "update a fine-tuning question")

            question = await self._questions.get_by_id(command.question_id)
            if question is None or question.created_by != user_id.value:
                raise EntityNotFoundError("Fine-tuning question not found")

            if fields:
                question = await self._questions.update(command.question_id, fields)
                if question is None:
                    raise EntityNotFoundError("Fine-tuning question not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[FINE_TUNING] Update of {command.question_id} failed: {e}")
            return ServiceResult.from_exception(e)

        if payload.replaces_associations():
            await unlink_all(self._links, question.id)
            await link_bots(self._links, question.id, unique_strings(payload.bot_ids))

        return ServiceResult.ok(await with_persisted_bot_ids(self._links, question))
