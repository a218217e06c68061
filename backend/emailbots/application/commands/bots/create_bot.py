"""
Create Bot Command.

Steps:
1. Require a signed-in identity
2. Reject an email address another bot already uses (fast path; the unique
   constraint on bots.email_address is the real guarantee)
3. Insert with defaults: active, 0 emails, 100% response rate, assistant pending
4. Schedule assistant provisioning in the background; creation never waits
   for it and never fails because of it
"""

import logging
from dataclasses import dataclass
from typing import Optional

from emailbots.application.common.background import BackgroundTaskRunner
from emailbots.application.common.interfaces import Command, CommandHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.application.commands.bots.provision_assistant import (
    ProvisionAssistantCommand,
    ProvisionAssistantHandler,
)
from emailbots.application.dto.bot import BotCreate
from emailbots.config.settings import Config
from emailbots.domain.entities.bot import AssistantStatus, Bot, BotStatus
from emailbots.domain.exceptions import DuplicateEmailError, GatewayConflictError
from emailbots.domain.ports.repositories import BotRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateBotCommand(Command[ServiceResult[Bot]]):
    user_id: Optional[UserId]
    payload: BotCreate


class CreateBotHandler(CommandHandler[ServiceResult[Bot]]):
    def __init__(
        self,
        bot_repository: BotRepository,
        provision_handler: Optional[ProvisionAssistantHandler] = None,
        task_runner: Optional[BackgroundTaskRunner] = None,
    ):
        self._bots = bot_repository
        self._provision = provision_handler
        self._tasks = task_runner

    async def execute(self, command: CreateBotCommand) -> ServiceResult[Bot]:
        payload = command.payload
        try:
            user_id = require_identity(command.user_id, "create a bot")

            existing = await self._bots.find_by_email(payload.email_address)
            if existing is not None:
                raise DuplicateEmailError(payload.email_address)

            try:
                bot = await self._bots.create(
                    user_id,
                    {
                        "name": payload.name,
                        "email_address": payload.email_address,
                        "description": payload.description or "",
                        "status": BotStatus.ACTIVE,
                        "total_emails": 0,
                        "response_rate": Config.BOT_DEFAULT_RESPONSE_RATE,
                        "assistant_status": AssistantStatus.PENDING,
                        "assistant_model": Config.ASSISTANT_MODEL,
                        "forward_email_display": Config.BOT_FORWARD_EMAIL_DISPLAY,
                        "forward_template_id": payload.forward_template_id or None,
                        "forward_email_address": payload.forward_email_address or None,
                        "include_customer_in_forward": payload.include_customer_in_forward,
                    },
                )
            except GatewayConflictError as e:
                raise DuplicateEmailError(payload.email_address) from e
        except SERVICE_ERRORS as e:
            logger.warning(f"[BOTS] Create failed: {e}")
            return ServiceResult.from_exception(e)

        logger.info(f"[BOTS] Created bot {bot.id} for {user_id}")
        self._schedule_provisioning(bot)
        return ServiceResult.ok(bot)

    def _schedule_provisioning(self, bot: Bot) -> None:
        if self._provision is None or self._tasks is None:
            logger.debug(f"[BOTS] No provisioner wired, bot {bot.id} stays pending")
            return
        self._tasks.spawn(
            self._provision.execute(ProvisionAssistantCommand(bot_id=bot.id)),
            name=f"provision-assistant-{bot.id}",
        )
