"""
EmailTemplate Entity - A reusable reply with {{variable}} placeholders.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from emailbots.domain.value_objects.string_set import unique_strings

_PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


class TemplateCategory(str, Enum):
    SUPPORT = "support"
    SALES = "sales"
    ONBOARDING = "onboarding"
    HANDOFF = "handoff"
    OTHER = "other"


@dataclass(frozen=True)
class EmailTemplate:
    id: str
    name: str
    category: TemplateCategory
    subject: str
    content: str
    last_modified: datetime
    variables: tuple[str, ...] = ()
    language: str = "en"
    is_active: bool = True
    tags: tuple[str, ...] = ()
    created_by: Optional[str] = None

    def placeholders(self) -> list[str]:
        """Variable names referenced in subject and body, first-seen order."""
        return unique_strings(
            _PLACEHOLDER_RE.findall(self.subject) + _PLACEHOLDER_RE.findall(self.content)
        )

    def render(self, values: dict[str, str]) -> tuple[str, str]:
        """Fill placeholders; unknown variables are left untouched."""

        def _sub(match: re.Match) -> str:
            return str(values.get(match.group(1), match.group(0)))

        return _PLACEHOLDER_RE.sub(_sub, self.subject), _PLACEHOLDER_RE.sub(
            _sub, self.content
        )

