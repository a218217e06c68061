"""
OpenAI Assistants implementation of the AssistantProvisioner port.

Every bot is backed by one assistant with the file_search tool, so its
knowledge base documents can be attached later. Provider failures of any
kind surface as ProvisioningError carrying the provider's message.
"""

import logging
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from emailbots.domain.exceptions import ProvisioningError
from emailbots.domain.ports.assistant_provisioner import AssistantProvisioner, AssistantRef

logger = logging.getLogger(__name__)

# Assistants API limits
_MAX_NAME = 256
_MAX_DESCRIPTION = 512

_TOOLS = [{"type": "file_search"}]


class OpenAIAssistantProvisioner(AssistantProvisioner):
    def __init__(self, client: AsyncOpenAI):
        self._client = client

    async def create(
        self, name: str, description: str, instructions: str, model: str
    ) -> AssistantRef:
        try:
            assistant = await self._client.beta.assistants.create(
                name=name[:_MAX_NAME],
                description=(description or "")[:_MAX_DESCRIPTION],
                instructions=instructions,
                model=model,
                tools=_TOOLS,
            )
        except OpenAIError as e:
            logger.error(f"[ASSISTANTS] Create failed for '{name}': {e}")
            raise ProvisioningError(str(e) or "Failed to create assistant") from e

        logger.info(f"[ASSISTANTS] Created {assistant.id} ({assistant.model})")
        return AssistantRef(assistant_id=assistant.id, model=assistant.model)

    async def update(
        self,
        assistant_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        instructions: Optional[str] = None,
        model: Optional[str] = None,
    ) -> AssistantRef:
        changes: dict[str, Any] = {}
        if name is not None:
            changes["name"] = name[:_MAX_NAME]
        if description is not None:
            changes["description"] = description[:_MAX_DESCRIPTION]
        if instructions is not None:
            changes["instructions"] = instructions
        if model is not None:
            changes["model"] = model

        try:
            assistant = await self._client.beta.assistants.update(assistant_id, **changes)
        except OpenAIError as e:
            logger.error(f"[ASSISTANTS] Update of {assistant_id} failed: {e}")
            raise ProvisioningError(str(e) or "Failed to update assistant") from e

        return AssistantRef(assistant_id=assistant.id, model=assistant.model)

    async def delete(self, assistant_id: str) -> None:
        try:
            await self._client.beta.assistants.delete(assistant_id)
        except OpenAIError as e:
            logger.error(f"[ASSISTANTS] Delete of {assistant_id} failed: {e}")
            raise ProvisioningError(str(e) or "Failed to delete assistant") from e
        logger.info(f"[ASSISTANTS] Deleted {assistant_id}")
