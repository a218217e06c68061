"""Bot queries."""

from .list_bots import ListBotsQuery, ListBotsHandler
from .authenticate_bot import AuthenticateBotQuery, AuthenticateBotHandler

__all__ = [
    "ListBotsQuery",
    "ListBotsHandler",
    "AuthenticateBotQuery",
    "AuthenticateBotHandler",
]
