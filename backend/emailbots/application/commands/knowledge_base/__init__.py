"""Knowledge base commands."""

from .create_item import CreateKnowledgeBaseItemCommand, CreateKnowledgeBaseItemHandler
from .update_item import UpdateKnowledgeBaseItemCommand, UpdateKnowledgeBaseItemHandler
from .delete_item import DeleteKnowledgeBaseItemCommand, DeleteKnowledgeBaseItemHandler

__all__ = [
    "CreateKnowledgeBaseItemCommand",
    "CreateKnowledgeBaseItemHandler",
    "UpdateKnowledgeBaseItemCommand",
    "UpdateKnowledgeBaseItemHandler",
    "DeleteKnowledgeBaseItemCommand",
    "DeleteKnowledgeBaseItemHandler",
]
