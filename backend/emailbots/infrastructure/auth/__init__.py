"""Session identity adapters."""

from emailbots.infrastructure.auth.session_providers import (
    JwtSessionProvider,
    StaticSessionProvider,
    decode_session_token,
    issue_session_token,
)

__all__ = [
    "JwtSessionProvider",
    "StaticSessionProvider",
    "decode_session_token",
    "issue_session_token",
]
