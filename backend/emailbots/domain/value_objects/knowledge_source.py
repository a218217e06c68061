"""
KnowledgeSource Value Object - Where a knowledge-base item comes from.

Website sources are normalized before they are compared or stored:
a missing scheme becomes ``https://`` and the result must be an
absolute http(s) URL with a host.
"""

from dataclasses import dataclass
from urllib.parse import urlsplit

from emailbots.domain.exceptions.invalid_url import InvalidUrlError

_SCHEMES = ("http://", "https://")


@dataclass(frozen=True)
class KnowledgeSource:
    value: str

    def __post_init__(self):
        if not self.value or not self.value.strip():
            raise ValueError("Knowledge source cannot be empty")
        object.__setattr__(self, "value", self.value.strip())

    @classmethod
    def for_item(cls, item_type: str, raw: str) -> "KnowledgeSource":
        """Build a source for the given item type, normalizing websites."""
        if item_type == "website":
            return cls(normalize_website_url(raw))
        return cls(raw)

    def __str__(self) -> str:
        return self.value


def normalize_website_url(raw: str) -> str:
    url = (raw or "").strip()
    if not url.lower().startswith(_SCHEMES):
        url = "https://" + url

    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidUrlError() from e

    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidUrlError()
    if any(ch.isspace() for ch in url):
        raise InvalidUrlError()
    return url
