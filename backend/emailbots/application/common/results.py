"""
Uniform result envelope returned by every entity service.

Handlers never raise the domain taxonomy to their callers. They return
``ServiceResult.ok(entity)`` or ``ServiceResult.fail(...)``; the Domain Store
turns a failure back into an exception for the presentation layer.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from emailbots.domain.exceptions import (
    DomainValidationError,
    DuplicateEmailError,
    DuplicateSourceError,
    EntityNotFoundError,
    GatewayError,
    InvalidUrlError,
    UnauthenticatedError,
)
from emailbots.domain.value_objects.user_id import UserId

T = TypeVar("T")

# Everything a handler converts into a failure envelope. Anything else is a bug
# and propagates.
SERVICE_ERRORS = (
    UnauthenticatedError,
    DuplicateEmailError,
    DuplicateSourceError,
    InvalidUrlError,
    EntityNotFoundError,
    GatewayError,
    DomainValidationError,
)


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, error_code: str = "gateway_error") -> "ServiceResult[T]":
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def from_exception(cls, exc: Exception) -> "ServiceResult[T]":
        message = getattr(exc, "message", None) or str(exc)
        return cls.fail(message, getattr(exc, "code", "gateway_error"))


def require_identity(user_id: Optional[UserId], action: str) -> UserId:
    """Return the identity or raise UnauthenticatedError naming the action."""
    if user_id is None:
        raise UnauthenticatedError(f"Please sign in to {action}")
    return user_id
