"""Fine-tuning question commands."""

from .create_question import (
    CreateFineTuningQuestionCommand,
    CreateFineTuningQuestionHandler,
)
from .update_question import (
    UpdateFineTuningQuestionCommand,
    UpdateFineTuningQuestionHandler,
)
from .delete_question import (
    DeleteFineTuningQuestionCommand,
    DeleteFineTuningQuestionHandler,
)

__all__ = [
    "CreateFineTuningQuestionCommand",
    "CreateFineTuningQuestionHandler",
    "UpdateFineTuningQuestionCommand",
    "UpdateFineTuningQuestionHandler",
    "DeleteFineTuningQuestionCommand",
    "DeleteFineTuningQuestionHandler",
]
