"""
Bot Entity - An AI email responder owned by a dashboard user.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class BotStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AssistantStatus(str, Enum):
    """Provisioning state of the external assistant backing a bot."""

    PENDING = "pending"
    ACTIVE = "active"


@dataclass(frozen=True)
class Bot:
    id: str
    name: str
    email_address: str
    status: BotStatus
    created_at: datetime
    total_emails: int
    response_rate: float
    description: str = ""
    last_active: Optional[datetime] = None
    forward_template_id: Optional[str] = None
    forward_email_address: Optional[str] = None
    forward_email_display: Optional[str] = None
    include_customer_in_forward: bool = False
    assistant_status: AssistantStatus = AssistantStatus.PENDING
    assistant_id: Optional[str] = None
    assistant_model: Optional[str] = None
    created_by: Optional[str] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Bot name cannot be empty")
        if not 0 <= self.response_rate <= 100:
            raise ValueError(f"Invalid response rate: {self.response_rate}")

    @property
    def is_provisioned(self) -> bool:
        return self.assistant_status == AssistantStatus.ACTIVE and bool(
            self.assistant_id
        )
