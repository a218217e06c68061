"""Bot DTOs for create/update payloads."""

from typing import ClassVar, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from emailbots.application.dto.base import PartialUpdate
from emailbots.domain.entities.bot import BotStatus


class BotCreate(BaseModel):
    name: str = Field(min_length=1)
    email_address: EmailStr
    description: str = ""
    # Shown in the create form; accepted but not persisted
    response_time: Optional[str] = None
    forward_template_id: Optional[str] = None
    forward_email_address: Optional[EmailStr] = None
    include_customer_in_forward: bool = False


class BotUpdate(PartialUpdate):
    """Partial update. Only fields the caller actually set are written."""

    NULLABLE: ClassVar[frozenset[str]] = frozenset({"forward_template_id", "forward_email_address"})

    name: Optional[str] = None
    email_address: Optional[EmailStr] = None
    description: Optional[str] = None
    status: Optional[BotStatus] = None
    forward_template_id: Optional[str] = None
    forward_email_address: Optional[EmailStr] = None
    include_customer_in_forward: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Bot name cannot be empty")
        return value
