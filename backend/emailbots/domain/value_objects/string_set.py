"""
Tag / variable sets - stored as ordered lists, compared as sets.
"""

from typing import Iterable


def unique_strings(values: Iterable[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate while keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        cleaned = str(value).strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)
