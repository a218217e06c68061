"""Email template DTOs for create/update payloads."""

from typing import Optional

from pydantic import BaseModel, Field

from emailbots.application.dto.base import PartialUpdate
from emailbots.domain.entities.email_template import TemplateCategory


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1)
    category: TemplateCategory
    subject: str
    content: str
    variables: list[str] = Field(default_factory=list)
    language: Optional[str] = None
    is_active: bool = True
    tags: list[str] = Field(default_factory=list)


class TemplateUpdate(PartialUpdate):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[TemplateCategory] = None
    subject: Optional[str] = None
    content: Optional[str] = None
    variables: Optional[list[str]] = None
    language: Optional[str] = None
    is_active: Optional[bool] = None
    tags: Optional[list[str]] = None
