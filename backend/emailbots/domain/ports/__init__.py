"""
PORTS - Interfaces that infrastructure implements

A "port" is an abstract interface that defines WHAT the domain needs,
without specifying HOW it's done.

Subfolders:
- repositories/           → Gateway table interfaces
- assistant_provisioner   → external assistant API
- session_provider        → signed-in identity
"""

from emailbots.domain.ports.assistant_provisioner import AssistantProvisioner, AssistantRef
from emailbots.domain.ports.session_provider import SessionProvider

__all__ = [
    "AssistantProvisioner",
    "AssistantRef",
    "SessionProvider",
]
