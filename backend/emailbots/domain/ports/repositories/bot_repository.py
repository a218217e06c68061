"""
Bot Repository Port - Interface for the `bots` table.
Implementation: emailbots/infrastructure/persistence/prisma_bot_repository.py

Field mappings passed to create/update use the entity's attribute names,
plus `api_key_hash`, which is never mapped back onto a Bot and is only read
through get_api_key_hash for key verification.
Writes raise GatewayConflictError on a unique-constraint violation and
GatewayError on any other remote failure.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from emailbots.domain.entities.bot import Bot
from emailbots.domain.value_objects.user_id import UserId


class BotRepository(ABC):
    @abstractmethod
    async def list_for_creator(self, user_id: UserId) -> list[Bot]: ...

    @abstractmethod
    async def get_by_id(self, bot_id: str) -> Optional[Bot]: ...

    @abstractmethod
    async def find_by_email(
        self, email_address: str, exclude_id: Optional[str] = None
    ) -> Optional[Bot]: ...

    @abstractmethod
    async def list_pending_assistants(self, user_id: UserId) -> list[Bot]: ...

    @abstractmethod
    async def create(self, created_by: UserId, fields: Mapping[str, Any]) -> Bot: ...

    @abstractmethod
    async def update(self, bot_id: str, fields: Mapping[str, Any]) -> Optional[Bot]: ...

    @abstractmethod
    async def delete(self, bot_id: str) -> bool: ...

    @abstractmethod
    async def activate_assistant(self, bot_id: str, fields: Mapping[str, Any]) -> Optional[Bot]:
        """
        Apply fields only while the bot is still assistant_status=pending.
        Returns None when the bot is gone or another writer activated it first.
        """

    @abstractmethod
    async def get_api_key_hash(self, bot_id: str) -> Optional[str]: ...
