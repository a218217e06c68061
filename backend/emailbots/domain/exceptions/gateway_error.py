"""
GatewayError - Any remote table failure, message passed through.
Maps to: HTTP 502 Bad Gateway (409 for GatewayConflictError)
"""

from typing import Optional


class GatewayError(Exception):
    code = "gateway_error"

    def __init__(self, message: str = "Remote store request failed", table: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.table = table


class GatewayConflictError(GatewayError):
    """A storage-level uniqueness constraint rejected the write."""

    code = "conflict"

    def __init__(self, message: str = "Unique constraint violated", table: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, table=table)
        self.field = field
