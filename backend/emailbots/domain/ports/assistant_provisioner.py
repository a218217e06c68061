"""
Assistant Provisioner Port - The external service that manufactures an AI
responder identity from a bot's name and description.
Implementation: emailbots/infrastructure/assistants/openai_assistant_provisioner.py

Every method raises ProvisioningError on a provider failure.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AssistantRef:
    assistant_id: str
    model: str


class AssistantProvisioner(ABC):
    @abstractmethod
    async def create(
        self, name: str, description: str, instructions: str, model: str
    ) -> AssistantRef: ...

    @abstractmethod
    async def update(
        self,
        assistant_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        instructions: Optional[str] = None,
        model: Optional[str] = None,
    ) -> AssistantRef: ...

    @abstractmethod
    async def delete(self, assistant_id: str) -> None: ...
