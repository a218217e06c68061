"""
Session Providers - where the dashboard store gets the caller's identity.

- JwtSessionProvider: backed by a bearer token (HS256, same claims as the
  API auth dependency). The identity is the token's `sub` claim. An expired
  or invalid token means "nobody signed in".
- StaticSessionProvider: a fixed identity (scripts, tests).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from emailbots.config.settings import Config
from emailbots.domain.exceptions import UnauthenticatedError
from emailbots.domain.ports.session_provider import SessionProvider
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


def decode_session_token(
    token: str,
    secret: Optional[str] = None,
    issuer: Optional[str] = None,
    audience: Optional[str] = None,
) -> UserId:
    """Validate a session token and return its identity."""
    secret = secret or Config.SERVICE_AUTH_SECRET
    if not secret:
        raise UnauthenticatedError("Authentication is not configured")
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            audience=audience or Config.SERVICE_AUTH_AUDIENCE,
            issuer=issuer or Config.SERVICE_AUTH_ISSUER,
            options={"require": ["exp", "iat", "aud", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise UnauthenticatedError("Session has expired, please sign in again") from e
    except jwt.InvalidTokenError as e:
        raise UnauthenticatedError(f"Invalid token: {str(e)}") from e

    try:
        return UserId(str(claims["sub"]))
    except ValueError as e:
        raise UnauthenticatedError("Invalid token subject") from e


def issue_session_token(
    user_id: UserId,
    secret: Optional[str] = None,
    issuer: Optional[str] = None,
    audience: Optional[str] = None,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    now = datetime.now(timezone.utc)
    return jwt.encode(
        {
            "sub": user_id.value,
            "iss": issuer or Config.SERVICE_AUTH_ISSUER,
            "aud": audience or Config.SERVICE_AUTH_AUDIENCE,
            "iat": now,
            "exp": now + ttl,
        },
        secret or Config.SERVICE_AUTH_SECRET,
        algorithm="HS256",
    )


class JwtSessionProvider(SessionProvider):
    def __init__(
        self,
        token: Optional[str] = None,
        secret: Optional[str] = None,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._token = token

    def sign_in(self, token: str) -> UserId:
        """Adopt a new token; raises UnauthenticatedError if it is not valid."""
        user_id = decode_session_token(token, self._secret, self._issuer, self._audience)
        self._token = token
        return user_id

    def sign_out(self) -> None:
        self._token = None

    async def get_user_id(self) -> Optional[UserId]:
        if not self._token:
            return None
        try:
            return decode_session_token(
                self._token, self._secret, self._issuer, self._audience
            )
        except UnauthenticatedError as e:
            logger.info(f"[AUTH] Session token rejected: {e.message}")
            return None


class StaticSessionProvider(SessionProvider):
    def __init__(self, user_id: Optional[UserId] = None):
        self._user_id = user_id

    def sign_in(self, user_id: UserId) -> None:
        self._user_id = user_id

    def sign_out(self) -> None:
        self._user_id = None

    async def get_user_id(self) -> Optional[UserId]:
        return self._user_id
