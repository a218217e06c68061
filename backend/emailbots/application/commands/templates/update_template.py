"""Update Template Command - partial merge, last_modified refreshed on every write."""

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
from emailbots.application.dto.template import TemplateUpdate
from emailbots.domain.entities.email_template import EmailTemplate
from emailbots.domain.value_objects.string_set import unique_strings
from emailbots.domain.exceptions import EntityNotFoundError
from emailbots.domain.ports.repositories import TemplateRepository
from emailbots.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateTemplateCommand(Command[ServiceResult[EmailTemplate]]):
    user_id: Optional[UserId]
    template_id: str
    payload: TemplateUpdate


class UpdateTemplateHandler(CommandHandler[ServiceResult[EmailTemplate]]):
    def __init__(self, template_repository: TemplateRepository):
        self._templates = template_repository

    async def execute(self, command: UpdateTemplateCommand) -> ServiceResult[EmailTemplate]:
        fields = command.payload.changes()
        for key in ("variables", "tags"):
            if key in fields:
                fields[key] = unique_strings(fields[key])

        try:
            user_id = require_identity(command.user_id, "update a template")

            existing = await self._templates.get_by_id(command.template_id)
            if existing is None or existing.created_by != user_id.value:
                raise EntityNotFoundError("Template not found")
            if not fields:
                return ServiceResult.ok(existing)

            fields["last_modified"] = datetime.now(timezone.utc)
            template = await self._templates.update(command.template_id, fields)
            if template is None:
                raise EntityNotFoundError("Template not found")
        except SERVICE_ERRORS as e:
            logger.warning(f"[TEMPLATES] Update of {command.template_id} failed: {e}")
            return ServiceResult.from_exception(e)

        return ServiceResult.ok(template)
