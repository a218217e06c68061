"""
Create Template Command.

Templates have no uniqueness rule. Variables and tags are treated as sets
(first-seen order kept); language falls back to the configured default.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from emailbots.application.common.interfaces import Command, CommandHandler
from emailbots.application.common.results import (
    SERVICE_ERRORS,
    ServiceResult,
    require_identity,
)
from emailbots.application.dto.template import TemplateCreate
from emailbots.config.settings import Config
from emailbots.domain.entities.email_template import EmailTemplate
from emailbots.domain.value_objects.string_set import unique_strings
from emailbots.domain.ports.repositories import TemplateRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateTemplateCommand(Command[ServiceResult[EmailTemplate]]):
    user_id: Optional[UserId]
    payload: TemplateCreate


class CreateTemplateHandler(CommandHandler[ServiceResult[EmailTemplate]]):
    def __init__(self, template_repository: TemplateRepository):
        self._templates = template_repository

    async def execute(self, command: CreateTemplateCommand) -> ServiceResult[EmailTemplate]:
        payload = command.payload
        try:
            user_id = require_identity(command.user_id, "create a template")
            template = await self._templates.create(
                user_id,
                {
                    "name": payload.name,
                    "category": payload.category,
                    "subject": payload.subject,
                    "content": payload.content,
                    "variables": unique_strings(payload.variables),
                    "language": payload.language or Config.TEMPLATE_DEFAULT_LANGUAGE,
                    "is_active": payload.is_active,
                    "tags": unique_strings(payload.tags),
                    "last_modified": datetime.now(timezone.utc),
                },
            )
        except SERVICE_ERRORS as e:
            logger.warning(f"[TEMPLATES] Create failed: {e}")
            return ServiceResult.from_exception(e)

        return ServiceResult.ok(template)
