"""
Authentication Dependency for FastAPI.

- Extracts the bearer token from the Authorization header
- Validates it (HS256, exp/iat/aud/iss/sub required)
- Returns the caller's identity plus the raw token, which the store
  registry hands to that caller's session provider

Config (from emailbots.config.settings):
- SERVICE_AUTH_SECRET
- SERVICE_AUTH_ISSUER
- SERVICE_AUTH_AUDIENCE
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from emailbots.domain.exceptions import UnauthenticatedError
from emailbots.domain.value_objects.user_id import UserId
from emailbots.infrastructure.auth import decode_session_token


@dataclass(frozen=True)
class AuthUser:
    user_id: UserId
    token: str


security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    """
    Extract and validate user from JWT token.

    Raises:
        HTTPException 401 if token is missing, invalid, expired, or has no valid subject
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please sign in to continue",
        )

    token = credentials.credentials
    try:
        user_id = decode_session_token(token)
    except UnauthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e

    return AuthUser(user_id=user_id, token=token)
