"""Assistant provider adapters."""

from emailbots.infrastructure.assistants.openai_assistant_provisioner import (
    OpenAIAssistantProvisioner,
)

__all__ = ["OpenAIAssistantProvisioner"]
