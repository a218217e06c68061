"""
Validation errors - Raised when a business rule or schema is violated.
Maps to: HTTP 422 Unprocessable Entity
"""


class DomainValidationError(Exception):
    """Exception raised for domain validation errors."""

    code = "invalid_input"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SettingsValidationError(DomainValidationError):
    """Settings schema rejection, carrying one message per offending field."""

    code = "validation_error"

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "Invalid settings")
