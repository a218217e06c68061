"""
Knowledge Base Repository Port - Interface for the `knowledge_base` table.
Implementation: emailbots/infrastructure/persistence/prisma_knowledge_base_repository.py

`source` carries a unique constraint; a violating write raises
GatewayConflictError.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from emailbots.domain.entities.knowledge_base_item import KnowledgeBaseItem
from emailbots.domain.value_objects.user_id import UserId


class KnowledgeBaseRepository(ABC):
    @abstractmethod
    async def list_for_creator(self, user_id: UserId) -> list[KnowledgeBaseItem]: ...

    @abstractmethod
    async def get_by_id(self, item_id: str) -> Optional[KnowledgeBaseItem]: ...

    @abstractmethod
    async def find_by_source(
        self, source: str, exclude_id: Optional[str] = None
    ) -> Optional[KnowledgeBaseItem]: ...

    @abstractmethod
    async def create(
        self, created_by: UserId, fields: Mapping[str, Any]
    ) -> KnowledgeBaseItem: ...

    @abstractmethod
    async def update(
        self, item_id: str, fields: Mapping[str, Any]
    ) -> Optional[KnowledgeBaseItem]: ...

    @abstractmethod
    async def delete(self, item_id: str) -> bool: ...
