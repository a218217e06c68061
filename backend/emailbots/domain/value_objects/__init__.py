"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from emailbots.domain.value_objects.user_id import UserId
from emailbots.domain.value_objects.knowledge_source import (
    KnowledgeSource,
    normalize_website_url,
)
from emailbots.domain.value_objects.string_set import unique_strings

__all__ = [
    "UserId",
    "KnowledgeSource",
    "normalize_website_url",
    "unique_strings",
]
