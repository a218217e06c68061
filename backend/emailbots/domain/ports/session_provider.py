"""
Session Provider Port - Yields the identity of the signed-in dashboard user.
Implementations: emailbots/infrastructure/auth/session_providers.py
"""

from abc import ABC, abstractmethod
from typing import Optional

from emailbots.domain.value_objects.user_id import UserId


class SessionProvider(ABC):
    @abstractmethod
    async def get_user_id(self) -> Optional[UserId]:
        """Return the current identity, or None when nobody is signed in."""
        ...
