"""
QUERIES - Read operations (CQRS)

Queries retrieve data without modifying state. Each query has:
- Query class: Parameters for the read (the caller identity)
- Handler class: Executes the read and returns a ServiceResult

Subfolders:
- bots/           → list_bots, authenticate_bot (bot API key)
- templates/      → list_templates
- knowledge_base/ → list_items
- fine_tuning/    → list_questions (bot_ids merged from the join table)
- conversations/  → list_conversations
"""

from emailbots.application.queries.bots import (
    AuthenticateBotHandler,
    AuthenticateBotQuery,
    ListBotsHandler,
    ListBotsQuery,
)
from emailbots.application.queries.templates import (
    ListTemplatesQuery,
    ListTemplatesHandler,
)
from emailbots.application.queries.knowledge_base import (
    ListKnowledgeBaseQuery,
    ListKnowledgeBaseHandler,
)
from emailbots.application.queries.fine_tuning import (
    ListFineTuningQuestionsQuery,
    ListFineTuningQuestionsHandler,
)
from emailbots.application.queries.conversations import (
    ListConversationsQuery,
    ListConversationsHandler,
)

__all__ = [
    "ListBotsQuery",
    "ListBotsHandler",
    "AuthenticateBotQuery",
    "AuthenticateBotHandler",
    "ListTemplatesQuery",
    "ListTemplatesHandler",
    "ListKnowledgeBaseQuery",
    "ListKnowledgeBaseHandler",
    "ListFineTuningQuestionsQuery",
    "ListFineTuningQuestionsHandler",
    "ListConversationsQuery",
    "ListConversationsHandler",
]
