"""
EntityNotFoundError - Raised when an update/delete target does not exist.
Maps to: HTTP 404 Not Found
"""


class EntityNotFoundError(Exception):
    """Exception raised when a requested entity is not found."""

    code = "not_found"

    def __init__(self, message: str = "The requested entity was not found."):
        super().__init__(message)
        self.message = message
