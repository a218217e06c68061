"""Fine-tuning question DTOs for create/update payloads."""

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import BaseModel, Field

from emailbots.application.dto.base import PartialUpdate
from emailbots.domain.entities.fine_tuning_question import Difficulty


class FineTuningQuestionCreate(BaseModel):
    question: str = Field(min_length=1)
    expected_answer: str = Field(min_length=1)
    category: str
    difficulty: Difficulty
    tags: list[str] = Field(default_factory=list)
    is_active: bool = True
    bot_ids: list[str] = Field(default_factory=list)


class FineTuningQuestionUpdate(PartialUpdate):
    """
    Partial update.

    bot_ids semantics:
    - not set  → associations untouched
    - [] or [..] → every existing association is replaced by this set
    """

    NULLABLE: ClassVar[frozenset[str]] = frozenset({"last_used", "success_rate"})

    question: Optional[str] = Field(default=None, min_length=1)
    expected_answer: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    tags: Optional[list[str]] = None
    is_active: Optional[bool] = None
    last_used: Optional[datetime] = None
    success_rate: Optional[float] = Field(default=None, ge=0, le=100)
    bot_ids: Optional[list[str]] = None

    def replaces_associations(self) -> bool:
        return "bot_ids" in self.model_fields_set and self.bot_ids is not None
