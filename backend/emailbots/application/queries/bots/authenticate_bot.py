"""
Authenticate Bot Query - resolve a bot from its own API key.

Used by machine clients (the email pipeline) that hold a bot credential
instead of a dashboard session. Any mismatch is reported as Unauthenticated,
never as NotFound, so a bad key reveals nothing about which bot ids exist.
"""

from dataclasses import dataclass

from emailbots.application.common.credentials import verify_api_key
from emailbots.application.common.interfaces import Query, QueryHandler
from emailbots.application.common.results import SERVICE_ERRORS, ServiceResult
from emailbots.domain.entities.bot import Bot
from emailbots.domain.exceptions import UnauthenticatedError
from emailbots.domain.ports.repositories import BotRepository


@dataclass(frozen=True)
class AuthenticateBotQuery(Query[ServiceResult[Bot]]):
    bot_id: str
    api_key: str


class AuthenticateBotHandler(QueryHandler[ServiceResult[Bot]]):
    def __init__(self, bot_repository: BotRepository):
        self._bots = bot_repository

    async def execute(self, query: AuthenticateBotQuery) -> ServiceResult[Bot]:
        try:
            key_hash = await self._bots.get_api_key_hash(query.bot_id)
            if not key_hash or not verify_api_key(query.api_key, key_hash):
                raise UnauthenticatedError("Invalid bot API key")
            bot = await self._bots.get_by_id(query.bot_id)
            if bot is None:
                raise UnauthenticatedError("Invalid bot API key")
            return ServiceResult.ok(bot)
        except SERVICE_ERRORS as e:
            return ServiceResult.from_exception(e)
