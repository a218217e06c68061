"""Email template commands."""

from .create_template import CreateTemplateCommand, CreateTemplateHandler
from .update_template import UpdateTemplateCommand, UpdateTemplateHandler
from .delete_template import DeleteTemplateCommand, DeleteTemplateHandler

__all__ = [
    "CreateTemplateCommand",
    "CreateTemplateHandler",
    "UpdateTemplateCommand",
    "UpdateTemplateHandler",
    "DeleteTemplateCommand",
    "DeleteTemplateHandler",
]
