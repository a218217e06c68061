"""
Template Repository Port - Interface for the `templates` table.
Implementation: emailbots/infrastructure/persistence/prisma_template_repository.py
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from emailbots.domain.entities.email_template import EmailTemplate
from emailbots.domain.value_objects.user_id import UserId


class TemplateRepository(ABC):
    @abstractmethod
    async def list_for_creator(self, user_id: UserId) -> list[EmailTemplate]: ...

    @abstractmethod
    async def get_by_id(self, template_id: str) -> Optional[EmailTemplate]: ...

    @abstractmethod
    async def create(
        self, created_by: UserId, fields: Mapping[str, Any]
    ) -> EmailTemplate: ...

    @abstractmethod
    async def update(
        self, template_id: str, fields: Mapping[str, Any]
    ) -> Optional[EmailTemplate]: ...

    @abstractmethod
    async def delete(self, template_id: str) -> bool: ...
