"""
Question ↔ bot association helpers.

Join-table failures are logged and swallowed: the question row is already
written, so the caller gets the question back with whatever associations
were actually persisted (always re-read, never echoed from the input).
"""

import logging
from dataclasses import replace

from emailbots.domain.entities.fine_tuning_question import FineTuningQuestion
from emailbots.domain.exceptions import GatewayError
from emailbots.domain.ports.repositories import BotQuestionLinkRepository

logger = logging.getLogger(__name__)


async def link_bots(links: BotQuestionLinkRepository, question_id: str, bot_ids: list[str]) -> None:
    if not bot_ids:
        return
    try:
        await links.add_links(question_id, bot_ids)
    except GatewayError as e:
        logger.error(f"[FINE_TUNING] Error creating bot associations for {question_id}: {e}")


async def unlink_all(links: BotQuestionLinkRepository, question_id: str) -> None:
    try:
        removed = await links.remove_all(question_id)
        logger.debug(f"[FINE_TUNING] Removed {removed} associations for {question_id}")
    except GatewayError as e:
        logger.error(f"[FINE_TUNING] Error removing bot associations for {question_id}: {e}")


async def with_persisted_bot_ids(
    links: BotQuestionLinkRepository, question: FineTuningQuestion
) -> FineTuningQuestion:
    try:
        bot_ids = await links.bot_ids_for(question.id)
    except GatewayError as e:
        logger.error(f"[FINE_TUNING] Could not re-read associations for {question.id}: {e}")
        bot_ids = []
    return replace(question, bot_ids=tuple(bot_ids))
