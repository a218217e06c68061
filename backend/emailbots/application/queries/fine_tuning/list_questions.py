"""
List Fine-Tuning Questions Query.

Question rows carry no association data; bot_ids are attached from one
batched read of the join table.
"""

from dataclasses import dataclass, replace
from typing import Optional

from emailbots.application.common.interfaces import Query, QueryHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.domain.entities.fine_tuning_question import FineTuningQuestion
from emailbots.domain.ports.repositories import (
    BotQuestionLinkRepository,
    FineTuningQuestionRepository,
)
from emailbots.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListFineTuningQuestionsQuery(Query[ServiceResult[list[FineTuningQuestion]]]):
    user_id: Optional[UserId]


class ListFineTuningQuestionsHandler(QueryHandler[ServiceResult[list[FineTuningQuestion]]]):
    def __init__(
        self,
        question_repository: FineTuningQuestionRepository,
        link_repository: BotQuestionLinkRepository,
    ):
        self._questions = question_repository
        self._links = link_repository

    async def execute(
        self, query: ListFineTuningQuestionsQuery
    ) -> ServiceResult[list[FineTuningQuestion]]:
        try:
            user_id = require_identity(query.user_id, "view fine-tuning questions")
            questions = await self._questions.list_for_creator(user_id)
            if not questions:
                return ServiceResult.ok([])
            links = await self._links.bot_ids_by_question(q.id for q in questions)
        except SERVICE_ERRORS as e:
            return ServiceResult.from_exception(e)

        return ServiceResult.ok(
            [replace(q, bot_ids=tuple(links.get(q.id, ()))) for q in questions]
        )
