"""Knowledge base queries."""

from .list_items import ListKnowledgeBaseQuery, ListKnowledgeBaseHandler

__all__ = ["ListKnowledgeBaseQuery", "ListKnowledgeBaseHandler"]
