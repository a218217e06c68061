"""List Conversations Query - conversations of every bot the caller owns."""

from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.interfaces import Query, QueryHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.domain.entities.conversation import Conversation
from emailbots.domain.ports.repositories import ConversationRepository
from emailbots.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListConversationsQuery(Query[ServiceResult[list[Conversation]]]):
    user_id: Optional[UserId]


class ListConversationsHandler(QueryHandler[ServiceResult[list[Conversation]]]):
    def __init__(self, conversation_repository: ConversationRepository):
        self._conversation_repository = conversation_repository

    async def execute(self, query: ListConversationsQuery) -> ServiceResult[list[Conversation]]:
        try:
            user_id = require_identity(query.user_id, "view conversations")
            return ServiceResult.ok(
                await self._conversation_repository.list_for_bot_owner(user_id)
            )
        except SERVICE_ERRORS as e:
            return ServiceResult.from_exception(e)
