"""
Reconcile Pending Assistants Command.

Sweeps the caller's bots that are still assistant_status=pending (provider
outage, crash between insert and provisioning) and provisions them one by
one. Each bot is independent: one failure does not stop the sweep.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

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
from emailbots.domain.ports.repositories import BotRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    provisioned: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ReconcilePendingAssistantsCommand(Command[ServiceResult[ReconcileReport]]):
    user_id: Optional[UserId]


class ReconcilePendingAssistantsHandler(CommandHandler[ServiceResult[ReconcileReport]]):
    def __init__(
        self,
        bot_repository: BotRepository,
        provision_handler: ProvisionAssistantHandler,
    ):
        self._bots = bot_repository
        self._provision = provision_handler

    async def execute(
        self, command: ReconcilePendingAssistantsCommand
    ) -> ServiceResult[ReconcileReport]:
        try:
            user_id = require_identity(command.user_id, "reconcile bots")
            pending = await self._bots.list_pending_assistants(user_id)
        except SERVICE_ERRORS as e:
            return ServiceResult.from_exception(e)

        report = ReconcileReport()
        for bot in pending:
            result = await self._provision.execute(ProvisionAssistantCommand(bot_id=bot.id))
            if result.success:
                report.provisioned.append(bot.id)
            else:
                report.failed[bot.id] = result.error or "provisioning failed"

        logger.info(
            f"[PROVISION] Sweep for {user_id}: {len(report.provisioned)} provisioned, "
            f"{len(report.failed)} still pending"
        )
        return ServiceResult.ok(report)
