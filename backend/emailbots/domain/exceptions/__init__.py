"""
DOMAIN EXCEPTIONS - Business rule violations

These exceptions are raised by domain logic and application handlers.
Handlers turn them into failure envelopes; the presentation layer maps
their ``code`` to HTTP status codes.
"""

from emailbots.domain.exceptions.entity_not_found import EntityNotFoundError
from emailbots.domain.exceptions.unauthenticated import UnauthenticatedError
from emailbots.domain.exceptions.duplicate import DuplicateEmailError, DuplicateSourceError
from emailbots.domain.exceptions.invalid_url import InvalidUrlError
from emailbots.domain.exceptions.gateway_error import GatewayError, GatewayConflictError
from emailbots.domain.exceptions.validation_error import (
    DomainValidationError,
    SettingsValidationError,
)
from emailbots.domain.exceptions.provisioning_error import ProvisioningError

__all__ = [
    "EntityNotFoundError",
    "UnauthenticatedError",
    "DuplicateEmailError",
    "DuplicateSourceError",
    "InvalidUrlError",
    "GatewayError",
    "GatewayConflictError",
    "DomainValidationError",
    "SettingsValidationError",
    "ProvisioningError",
]
