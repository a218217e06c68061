"""Shared application building blocks."""

from emailbots.application.common.interfaces import (
    Command,
    CommandHandler,
    Query,
    QueryHandler,
)
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.application.common.background import BackgroundTaskRunner

__all__ = [
    "Command",
    "CommandHandler",
    "Query",
    "QueryHandler",
    "SERVICE_ERRORS",
    "ServiceResult",
    "require_identity",
    "BackgroundTaskRunner",
]
