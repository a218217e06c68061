"""Shared base for partial-update payloads."""

from typing import Any, ClassVar

from pydantic import BaseModel


class PartialUpdate(BaseModel):
    # Fields that may be explicitly cleared by sending null
    NULLABLE: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        """Fields the caller set, minus nulls sent for non-nullable columns."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in self.NULLABLE
        }
