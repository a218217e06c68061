"""
Store Registry - one DashboardStore per signed-in identity.

The registry is app-scoped. Each identity's store keeps its own snapshot
and its own JwtSessionProvider; every request refreshes that provider with
the request's token, so an expired session turns into Unauthenticated
failures inside the store rather than stale access. A store lives until its
identity signs out (POST /dashboard/sign-out).
"""

import logging
from typing import Optional

from emailbots.application.settings import Settings
from emailbots.application.store import DashboardHandlers, DashboardStore
from emailbots.infrastructure.auth import JwtSessionProvider
from emailbots.presentation.dependencies.auth import AuthUser

logger = logging.getLogger(__name__)


class StoreRegistry:
    def __init__(self, handlers: DashboardHandlers, settings: Optional[Settings] = None):
        self._handlers = handlers
        self._settings = settings
        self._stores: dict[str, tuple[DashboardStore, JwtSessionProvider]] = {}

    def store_for(self, user: AuthUser) -> DashboardStore:
        key = user.user_id.value
        entry = self._stores.get(key)
        if entry is None:
            session = JwtSessionProvider()
            store = DashboardStore(session, self._handlers, settings=self._settings)
            entry = (store, session)
            self._stores[key] = entry
            logger.info(f"[STORES] New dashboard store for {key}")

        store, session = entry
        session.sign_in(user.token)
        return store

    def drop(self, user: AuthUser) -> bool:
        entry = self._stores.pop(user.user_id.value, None)
        if entry is None:
            return False
        entry[1].sign_out()
        return True

    def __len__(self) -> int:
        return len(self._stores)
