"""Conversation queries."""

from .list_conversations import ListConversationsQuery, ListConversationsHandler

__all__ = ["ListConversationsQuery", "ListConversationsHandler"]
