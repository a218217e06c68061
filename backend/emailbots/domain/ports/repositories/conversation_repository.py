"""
Conversation Repository Port - Read access to `conversations` and `messages`.
Implementation: emailbots/infrastructure/persistence/prisma_conversation_repository.py

Conversations are scoped through their bot's creator.
"""

from abc import ABC, abstractmethod

from emailbots.domain.entities.conversation import Conversation
from emailbots.domain.value_objects.user_id import UserId


class ConversationRepository(ABC):
    @abstractmethod
    async def list_for_bot_owner(self, user_id: UserId) -> list[Conversation]: ...
