"""List Bots Query - every bot created by the caller, newest first."""

from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.interfaces import Query, QueryHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.domain.entities.bot import Bot
from emailbots.domain.ports.repositories import BotRepository
from emailbots.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListBotsQuery(Query[ServiceResult[list[Bot]]]):
    user_id: Optional[UserId]


class ListBotsHandler(QueryHandler[ServiceResult[list[Bot]]]):
    def __init__(self, bot_repository: BotRepository):
        self._bots = bot_repository

    async def execute(self, query: ListBotsQuery) -> ServiceResult[list[Bot]]:
        try:
            user_id = require_identity(query.user_id, "view bots")
            return ServiceResult.ok(await self._bots.list_for_creator(user_id))
        except SERVICE_ERRORS as e:
            return ServiceResult.from_exception(e)
