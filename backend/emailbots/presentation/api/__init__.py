"""
API Routers - FastAPI endpoint definitions.
"""

from emailbots.presentation.api.dashboard import router as dashboard_router
from emailbots.presentation.api.bots import router as bots_router
from emailbots.presentation.api.templates import router as templates_router
from emailbots.presentation.api.knowledge_base import router as knowledge_base_router
from emailbots.presentation.api.fine_tuning import router as fine_tuning_router
from emailbots.presentation.api.conversations import router as conversations_router
from emailbots.presentation.api.settings import router as settings_router

__all__ = [
    "dashboard_router",
    "bots_router",
    "templates_router",
    "knowledge_base_router",
    "fine_tuning_router",
    "conversations_router",
    "settings_router",
]
