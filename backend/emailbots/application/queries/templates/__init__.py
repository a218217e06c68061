"""Template queries."""

from .list_templates import ListTemplatesQuery, ListTemplatesHandler

__all__ = ["ListTemplatesQuery", "ListTemplatesHandler"]
