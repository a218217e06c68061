"""
Shared helpers for the Prisma repositories.

gateway_errors() translates Prisma client failures into the domain's
GatewayError taxonomy so nothing above this package sees a Prisma type.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Mapping

from prisma.errors import PrismaError, UniqueViolationError

from emailbots.domain.exceptions import GatewayConflictError, GatewayError

logger = logging.getLogger(__name__)


@contextmanager
def gateway_errors(table: str) -> Iterator[None]:
    try:
        yield
    except UniqueViolationError as e:
        logger.info(f"[DB] Unique constraint violated on {table}: {e}")
        raise GatewayConflictError(str(e), table=table) from e
    except PrismaError as e:
        logger.error(f"[DB] {table} request failed: {e}")
        raise GatewayError(str(e) or f"Request to {table} failed", table=table) from e


def to_row(fields: Mapping[str, Any], writable: frozenset[str]) -> dict[str, Any]:
    """Keep writable columns only and store enums by value."""
    row = {}
    for key, value in fields.items():
        if key not in writable:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        row[key] = value
    return row
