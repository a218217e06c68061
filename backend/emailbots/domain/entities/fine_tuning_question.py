"""
FineTuningQuestion Entity - A question/expected-answer pair used to tune bots.

bot_ids is derived from the bot_fine_tuning_questions join table; it is
never stored on the question row.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class FineTuningQuestion:
    id: str
    question: str
    expected_answer: str
    category: str
    difficulty: Difficulty
    created_at: datetime
    tags: tuple[str, ...] = ()
    is_active: bool = True
    last_used: Optional[datetime] = None
    success_rate: Optional[float] = None
    bot_ids: tuple[str, ...] = ()
    created_by: Optional[str] = None
