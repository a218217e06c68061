"""
Prisma Fine-Tuning Repositories.

- PrismaFineTuningQuestionRepository: table `fine_tuning_questions`
- PrismaBotQuestionLinkRepository: join table `bot_fine_tuning_questions`
  (composite key bot_id + question_id)

Question rows are mapped with empty bot_ids; callers attach associations
from the link repository.
"""

from typing import Any, Iterable, Mapping, Optional

from prisma import Prisma
from prisma.models import FineTuningQuestion as PrismaFineTuningQuestion

from emailbots.domain.entities.fine_tuning_question import Difficulty, FineTuningQuestion
from emailbots.domain.ports.repositories import (
    BotQuestionLinkRepository,
    FineTuningQuestionRepository,
)
from emailbots.domain.value_objects.user_id import UserId
from emailbots.infrastructure.persistence._gateway import gateway_errors, to_row

_QUESTIONS = "fine_tuning_questions"
_LINKS = "bot_fine_tuning_questions"
_WRITABLE = frozenset(
    {
        "question",
        "expected_answer",
        "category",
        "difficulty",
        "tags",
        "is_active",
        "last_used",
        "success_rate",
    }
)


class PrismaFineTuningQuestionRepository(FineTuningQuestionRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaFineTuningQuestion) -> FineTuningQuestion:
        return FineTuningQuestion(
            id=record.id,
            question=record.question,
            expected_answer=record.expected_answer,
            category=record.category,
            difficulty=Difficulty(record.difficulty),
            created_at=record.created_at,
            tags=tuple(record.tags or ()),
            is_active=record.is_active,
            last_used=record.last_used,
            success_rate=record.success_rate,
            created_by=record.created_by,
        )

    async def list_for_creator(self, user_id: UserId) -> list[FineTuningQuestion]:
        with gateway_errors(_QUESTIONS):
            records = await self._prisma.finetuningquestion.find_many(
                where={"created_by": user_id.value},
                order={"created_at": "desc"},
            )
        return [self._to_entity(r) for r in records]

    async def get_by_id(self, question_id: str) -> Optional[FineTuningQuestion]:
        with gateway_errors(_QUESTIONS):
            record = await self._prisma.finetuningquestion.find_unique(
                where={"id": question_id}
            )
        return self._to_entity(record) if record else None

    async def create(
        self, created_by: UserId, fields: Mapping[str, Any]
    ) -> FineTuningQuestion:
        data = to_row(fields, _WRITABLE)
        data["created_by"] = created_by.value
        with gateway_errors(_QUESTIONS):
            record = await self._prisma.finetuningquestion.create(data=data)
        return self._to_entity(record)

    async def update(
        self, question_id: str, fields: Mapping[str, Any]
    ) -> Optional[FineTuningQuestion]:
        with gateway_errors(_QUESTIONS):
            record = await self._prisma.finetuningquestion.update(
                where={"id": question_id}, data=to_row(fields, _WRITABLE)
            )
        return self._to_entity(record) if record else None

    async def delete(self, question_id: str) -> bool:
        with gateway_errors(_QUESTIONS):
            record = await self._prisma.finetuningquestion.delete(where={"id": question_id})
        return record is not None


class PrismaBotQuestionLinkRepository(BotQuestionLinkRepository):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    async def bot_ids_for(self, question_id: str) -> list[str]:
        with gateway_errors(_LINKS):
            records = await self._prisma.botfinetuningquestion.find_many(
                where={"question_id": question_id},
                order={"created_at": "asc"},
            )
        return [r.bot_id for r in records]

    async def bot_ids_by_question(
        self, question_ids: Iterable[str]
    ) -> dict[str, list[str]]:
        ids = list(question_ids)
        if not ids:
            return {}
        with gateway_errors(_LINKS):
            records = await self._prisma.botfinetuningquestion.find_many(
                where={"question_id": {"in": ids}},
                order={"created_at": "asc"},
            )
        links: dict[str, list[str]] = {}
        for r in records:
            links.setdefault(r.question_id, []).append(r.bot_id)
        return links

    async def add_links(self, question_id: str, bot_ids: Iterable[str]) -> None:
        data = [{"bot_id": bot_id, "question_id": question_id} for bot_id in bot_ids]
        if not data:
            return
        with gateway_errors(_LINKS):
            await self._prisma.botfinetuningquestion.create_many(
                data=data, skip_duplicates=True
            )

    async def remove_all(self, question_id: str) -> int:
        with gateway_errors(_LINKS):
            return await self._prisma.botfinetuningquestion.delete_many(
                where={"question_id": question_id}
            )
