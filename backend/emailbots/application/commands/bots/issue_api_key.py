"""
Issue Bot API Key Command.

Generates a fresh `agc-<uuid>` credential for a bot and stores only its
bcrypt hash. The plaintext is returned exactly once, to this caller; issuing
again replaces (rotates) the previous key.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.credentials import generate_api_key, hash_api_key
from emailbots.application.common.interfaces import Command, CommandHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.config.settings import Config
from emailbots.domain.exceptions import EntityNotFoundError
from emailbots.domain.ports.repositories import BotRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedApiKey:
    bot_id: str
    api_key: str


@dataclass(frozen=True)
class IssueBotApiKeyCommand(Command[ServiceResult[IssuedApiKey]]):
    user_id: Optional[UserId]
    bot_id: str


class IssueBotApiKeyHandler(CommandHandler[ServiceResult[IssuedApiKey]]):
    def __init__(self, bot_repository: BotRepository, api_key_prefix: Optional[str] = None):
        self._bots = bot_repository
        self._prefix = api_key_prefix or Config.BOT_API_KEY_PREFIX

    async def execute(self, command: IssueBotApiKeyCommand) -> ServiceResult[IssuedApiKey]:
        try:
            user_id = require_identity(command.user_id, "manage bot API keys")

            bot = await self._bots.get_by_id(command.bot_id)
            if bot is None or bot.created_by != user_id.value:
                raise EntityNotFoundError("Bot not found")

            api_key = generate_api_key(self._prefix)
            if await self._bots.update(bot.id, {"api_key_hash": hash_api_key(api_key)}) is None:
                raise EntityNotFoundError("Bot not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[BOTS] API key for {command.bot_id} not issued: {e}")
            return ServiceResult.from_exception(e)

        logger.info(f"[BOTS] Issued new API key for bot {bot.id}")
        return ServiceResult.ok(IssuedApiKey(bot_id=bot.id, api_key=api_key))
