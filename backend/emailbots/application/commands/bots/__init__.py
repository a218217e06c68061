"""Bot commands."""

from .create_bot import CreateBotCommand, CreateBotHandler
from .update_bot import UpdateBotCommand, UpdateBotHandler
from .delete_bot import DeleteBotCommand, DeleteBotHandler
from .provision_assistant import ProvisionAssistantCommand, ProvisionAssistantHandler
from .issue_api_key import IssueBotApiKeyCommand, IssueBotApiKeyHandler, IssuedApiKey
from .reconcile_assistants import (
    ReconcilePendingAssistantsCommand,
    ReconcilePendingAssistantsHandler,
    ReconcileReport,
)

__all__ = [
    "CreateBotCommand",
    "CreateBotHandler",
    "UpdateBotCommand",
    "UpdateBotHandler",
    "DeleteBotCommand",
    "DeleteBotHandler",
    "ProvisionAssistantCommand",
    "ProvisionAssistantHandler",
    "IssueBotApiKeyCommand",
    "IssueBotApiKeyHandler",
    "IssuedApiKey",
    "ReconcilePendingAssistantsCommand",
    "ReconcilePendingAssistantsHandler",
    "ReconcileReport",
]
