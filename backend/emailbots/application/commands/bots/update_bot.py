"""
Update Bot Command.

Only fields the caller actually set are written. A changed email address is
re-checked for duplicates, excluding the bot itself. A name or description
change is pushed to the bot's assistant best-effort.
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
from emailbots.application.dto.bot import BotUpdate
from emailbots.domain.entities.bot import Bot
from emailbots.domain.exceptions import (
    DuplicateEmailError,
    EntityNotFoundError,
    GatewayConflictError,
    ProvisioningError,
)
from emailbots.domain.ports.assistant_provisioner import AssistantProvisioner
from emailbots.domain.ports.repositories import BotRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)

_ASSISTANT_FIELDS = ("name", "description")


@dataclass(frozen=True)
class UpdateBotCommand(Command[ServiceResult[Bot]]):
    user_id: Optional[UserId]
    bot_id: str
    payload: BotUpdate


class UpdateBotHandler(CommandHandler[ServiceResult[Bot]]):
    def __init__(
        self,
        bot_repository: BotRepository,
        provisioner: Optional[AssistantProvisioner] = None,
    ):
        self._bots = bot_repository
        self._provisioner = provisioner

    async def execute(self, command: UpdateBotCommand) -> ServiceResult[Bot]:
        fields = command.payload.changes()
        try:
            user_id = require_identity(command.user_id, "update a bot")

            existing = await self._bots.get_by_id(command.bot_id)
            if existing is None or existing.created_by != user_id.value:
                raise EntityNotFoundError("Bot not found")

            email = fields.get("email_address")
            if email is not None and email != existing.email_address:
                clash = await self._bots.find_by_email(email, exclude_id=command.bot_id)
                if clash is not None:
                    raise DuplicateEmailError(email)

            if not fields:
                return ServiceResult.ok(existing)

            try:
                bot = await self._bots.update(command.bot_id, fields)
            except GatewayConflictError as e:
                raise DuplicateEmailError(email or existing.email_address) from e
            if bot is None:
                raise EntityNotFoundError("Bot not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[BOTS] Update of {command.bot_id} failed: {e}")
            return ServiceResult.from_exception(e)

        await self._sync_assistant(existing, bot)
        return ServiceResult.ok(bot)

    async def _sync_assistant(self, before: Bot, after: Bot) -> None:
        if self._provisioner is None or not after.assistant_id:
            return
        changes = {
            field: getattr(after, field)
            for field in _ASSISTANT_FIELDS
            if getattr(after, field) != getattr(before, field)
        }
        if not changes:
            return
        try:
            await self._provisioner.update(after.assistant_id, **changes)
        except ProvisioningError as e:
            logger.warning(
                f"[BOTS] Assistant {after.assistant_id} not updated for bot {after.id}: {e.message}"
            )
