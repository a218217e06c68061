"""
InvalidUrlError - Raised when a website source is not a well-formed absolute URL.
Maps to: HTTP 422 Unprocessable Entity
"""


class InvalidUrlError(Exception):
    code = "invalid_url"

    def __init__(
        self,
        message: str = "Invalid URL format. Please include the full URL (e.g., https://example.com)",
    ):
        super().__init__(message)
        self.message = message
