"""
UnauthenticatedError - Raised when no active session identity is available.
Maps to: HTTP 401 Unauthorized
"""


class UnauthenticatedError(Exception):
    """Raised when an operation needs a signed-in identity and none is present"""

    code = "unauthenticated"

    def __init__(self, message: str = "Please sign in to continue"):
        super().__init__(message)
        self.message = message
