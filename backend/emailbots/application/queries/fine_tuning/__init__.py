"""Fine-tuning question queries."""

from .list_questions import ListFineTuningQuestionsQuery, ListFineTuningQuestionsHandler

__all__ = ["ListFineTuningQuestionsQuery", "ListFineTuningQuestionsHandler"]
