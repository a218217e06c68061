"""Knowledge base DTOs for create/update payloads."""

from typing import Optional

from pydantic import BaseModel, Field

from emailbots.application.dto.base import PartialUpdate
from emailbots.domain.entities.knowledge_base_item import KnowledgeBaseType


class KnowledgeBaseItemCreate(BaseModel):
    name: str = Field(min_length=1)
    type: KnowledgeBaseType
    source: str = Field(min_length=1)  # file name, or URL for websites
    description: str = ""
    tags: list[str] = Field(default_factory=list)


class KnowledgeBaseItemUpdate(PartialUpdate):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[KnowledgeBaseType] = None
    source: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    tags: Optional[list[str]] = None
