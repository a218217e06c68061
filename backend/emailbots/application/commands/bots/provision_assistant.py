"""
Provision Assistant Command - second phase of bot creation.

A bot row is inserted with assistant_status=pending. This handler asks the
assistant provider for an assistant, then moves the row to active with the
returned reference. On any failure the row stays pending;
ReconcilePendingAssistantsHandler retries it later.

The background task spawned by CreateBotHandler and the reconcile sweep can
target the same bot. Runs for one bot are serialized in-process, and the
final write only lands while the row is still pending, so a run that loses
(another process, or a delete) deletes the assistant it just created.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from emailbots.application.common.interfaces import Command, CommandHandler
from emailbots.application.common.results import SERVICE_ERRORS, ServiceResult
from emailbots.config.settings import Config
from emailbots.domain.entities.bot import AssistantStatus, Bot
from emailbots.domain.exceptions import EntityNotFoundError, ProvisioningError
from emailbots.domain.ports.assistant_provisioner import AssistantProvisioner
from emailbots.domain.ports.repositories import BotRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionAssistantCommand(Command[ServiceResult[Bot]]):
    bot_id: str


class ProvisionAssistantHandler(CommandHandler[ServiceResult[Bot]]):
    def __init__(
        self,
        bot_repository: BotRepository,
        provisioner: AssistantProvisioner,
        instructions: Optional[str] = None,
        model: Optional[str] = None,
    ):
        self._bots = bot_repository
        self._provisioner = provisioner
        self._instructions = instructions or Config.ASSISTANT_INSTRUCTIONS
        self._model = model or Config.ASSISTANT_MODEL
        # bot id -> (lock, number of runs holding or waiting for it)
        self._locks: dict[str, list] = {}

    @asynccontextmanager
    async def _exclusive(self, bot_id: str) -> AsyncIterator[None]:
        entry = self._locks.setdefault(bot_id, [asyncio.Lock(), 0])
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[bot_id]

    async def execute(self, command: ProvisionAssistantCommand) -> ServiceResult[Bot]:
        try:
            async with self._exclusive(command.bot_id):
                return ServiceResult.ok(await self._provision(command.bot_id))
        except ProvisioningError as e:
            logger.warning(f"[PROVISION] Bot {command.bot_id} left pending: {e.message}")
            return ServiceResult.from_exception(e)
        except SERVICE_ERRORS as e:
            logger.warning(f"[PROVISION] Bot {command.bot_id} left pending: {e}")
            return ServiceResult.from_exception(e)

    async def _provision(self, bot_id: str) -> Bot:
        bot = await self._bots.get_by_id(bot_id)
        if bot is None:
            raise EntityNotFoundError("Bot not found")
        if bot.is_provisioned:
            return bot

        ref = await self._provisioner.create(
            name=bot.name,
            description=bot.description,
            instructions=self._instructions,
            model=self._model,
        )

        try:
            updated = await self._bots.activate_assistant(
                bot.id,
                {
                    "assistant_id": ref.assistant_id,
                    "assistant_model": ref.model,
                    "assistant_status": AssistantStatus.ACTIVE,
                },
            )
        except SERVICE_ERRORS:
            await self._discard_assistant(ref.assistant_id)
            raise

        if updated is None:
            await self._discard_assistant(ref.assistant_id)
            current = await self._bots.get_by_id(bot.id)
            if current is None:
                raise EntityNotFoundError("Bot not found")
            logger.info(
                f"[PROVISION] Bot {bot.id} already linked to {current.assistant_id}, "
                f"dropped duplicate {ref.assistant_id}"
            )
            return current

        logger.info(
            f"[PROVISION] Bot {bot.id} linked to assistant {ref.assistant_id} ({ref.model})"
        )
        return updated

    async def _discard_assistant(self, assistant_id: str) -> None:
        try:
            await self._provisioner.delete(assistant_id)
        except ProvisioningError as e:
            logger.warning(f"[PROVISION] Orphaned assistant {assistant_id}: {e.message}")
