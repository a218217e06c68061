"""
Delete Bot Command - removes the row, then the bot's assistant best-effort.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.interfaces import Command, CommandHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.domain.exceptions import EntityNotFoundError, ProvisioningError
from emailbots.domain.ports.assistant_provisioner import AssistantProvisioner
from emailbots.domain.ports.repositories import BotRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteBotCommand(Command[ServiceResult[str]]):
    user_id: Optional[UserId]
    bot_id: str


class DeleteBotHandler(CommandHandler[ServiceResult[str]]):
    def __init__(
        self,
        bot_repository: BotRepository,
        provisioner: Optional[AssistantProvisioner] = None,
    ):
        self._bots = bot_repository
        self._provisioner = provisioner

    async def execute(self, command: DeleteBotCommand) -> ServiceResult[str]:
        try:
            user_id = require_identity(command.user_id, "delete a bot")

            bot = await self._bots.get_by_id(command.bot_id)
            if bot is None or bot.created_by != user_id.value:
                raise EntityNotFoundError("Bot not found")

            if not await self._bots.delete(command.bot_id):
                raise EntityNotFoundError("Bot not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[BOTS] Delete of {command.bot_id} failed: {e}")
            return ServiceResult.from_exception(e)

        if bot.assistant_id and self._provisioner is not None:
            try:
                await self._provisioner.delete(bot.assistant_id)
            except ProvisioningError as e:
                logger.warning(f"[BOTS] Assistant {bot.assistant_id} not deleted: {e.message}")

        logger.info(f"[BOTS] Deleted bot {command.bot_id}")
        return ServiceResult.ok(command.bot_id)
