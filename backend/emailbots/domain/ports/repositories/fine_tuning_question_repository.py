"""
Fine-Tuning Question Repository Ports.

- FineTuningQuestionRepository: the `fine_tuning_questions` table. Returned
  questions always have empty bot_ids; associations live in the join table.
- BotQuestionLinkRepository: the `bot_fine_tuning_questions` join table.

Implementation: emailbots/infrastructure/persistence/prisma_fine_tuning_repository.py
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional

from emailbots.domain.entities.fine_tuning_question import FineTuningQuestion
from emailbots.domain.value_objects.user_id import UserId


class FineTuningQuestionRepository(ABC):
    @abstractmethod
    async def list_for_creator(self, user_id: UserId) -> list[FineTuningQuestion]: ...

    @abstractmethod
    async def get_by_id(self, question_id: str) -> Optional[FineTuningQuestion]: ...

    @abstractmethod
    async def create(
        self, created_by: UserId, fields: Mapping[str, Any]
    ) -> FineTuningQuestion: ...

    @abstractmethod
    async def update(
        self, question_id: str, fields: Mapping[str, Any]
    ) -> Optional[FineTuningQuestion]: ...

    @abstractmethod
    async def delete(self, question_id: str) -> bool: ...


class BotQuestionLinkRepository(ABC):
    @abstractmethod
    async def bot_ids_for(self, question_id: str) -> list[str]: ...

    @abstractmethod
    async def bot_ids_by_question(
        self, question_ids: Iterable[str]
    ) -> dict[str, list[str]]: ...

    @abstractmethod
    async def add_links(self, question_id: str, bot_ids: Iterable[str]) -> None: ...

    @abstractmethod
    async def remove_all(self, question_id: str) -> int: ...
