"""
Dashboard settings schema and validation.

Settings are a single process-local object made of five sections. Partial
updates are merged into the current full object section by section, and
validation always runs on the merged result, never on the partial.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from emailbots.config.settings import Config

_http_url = TypeAdapter(HttpUrl)


def _optional_url(value: Optional[str]) -> Optional[str]:
    """Blank means "not configured"; anything else must be an http(s) URL."""
    if value is None or not str(value).strip():
        return None
    value = str(value).strip()
    try:
        _http_url.validate_python(value)
    except ValidationError as e:
        raise ValueError("Invalid URL") from e
    return value


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class GeneralSettings(_Section):
    company_name: str = Field(min_length=1)
    default_language: str = "en"
    timezone: str = "UTC"
    date_format: str = "MM/DD/YYYY"


class EmailSettings(_Section):
    default_from_name: str = Field(min_length=1)
    default_from_email: EmailStr
    reply_to_email: EmailStr
    email_footer: str = ""
    max_attachment_size: float = Field(ge=1)  # MB


class NotificationSettings(_Section):
    email_notifications: bool = True
    slack_webhook: Optional[str] = None
    slack_channel: Optional[str] = None
    notify_on_new_conversation: bool = True
    notify_on_handoff: bool = True
    notify_on_error: bool = True

    @field_validator("slack_webhook")
    @classmethod
    def check_slack_webhook(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)


class SecuritySettings(_Section):
    two_factor_enabled: bool = False
    allowed_domains: tuple[str, ...] = ()
    ip_whitelist: tuple[str, ...] = ()
    session_timeout: float  # minutes


class ApiSettings(_Section):
    api_key: str
    webhook_url: Optional[str] = None
    webhook_secret: Optional[str] = None

    @field_validator("webhook_url")
    @classmethod
    def check_webhook_url(cls, value: Optional[str]) -> Optional[str]:
        return _optional_url(value)


class Settings(_Section):
    general: GeneralSettings
    email: EmailSettings
    notifications: NotificationSettings
    security: SecuritySettings
    api: ApiSettings


def default_settings() -> Settings:
    return Settings(
        general=GeneralSettings(company_name=Config.DEFAULT_COMPANY_NAME),
        email=EmailSettings(
            default_from_name="AI Assistant",
            default_from_email=Config.DEFAULT_FROM_EMAIL,
            reply_to_email=Config.DEFAULT_REPLY_TO_EMAIL,
            email_footer=f"Powered by {Config.DEFAULT_COMPANY_NAME}",
            max_attachment_size=10,
        ),
        notifications=NotificationSettings(),
        security=SecuritySettings(session_timeout=30),
        api=ApiSettings(api_key=str(uuid.uuid4())),
    )


@dataclass
class SettingsValidationResult:
    settings: Optional[Settings] = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.settings is not None and not self.errors


def _format_error(error: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ())) or "settings"
    return f"{loc}: {error.get('msg', 'invalid value')}"


def validate_settings(candidate: Union[Settings, Mapping[str, Any]]) -> SettingsValidationResult:
    """Validate a full settings object, collecting one message per bad field."""
    data = candidate.model_dump() if isinstance(candidate, Settings) else candidate
    try:
        return SettingsValidationResult(settings=Settings.model_validate(data))
    except ValidationError as e:
        return SettingsValidationResult(errors=[_format_error(err) for err in e.errors()])


def merge_settings(current: Settings, partial: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge a partial update into the current settings, field by field within
    each section. Unknown sections are carried through so validation can
    reject them.
    """
    merged = current.model_dump()
    for section, values in partial.items():
        if section in merged and isinstance(values, Mapping):
            merged[section] = {**merged[section], **values}
        else:
            merged[section] = values
    return merged
