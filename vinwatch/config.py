"""Runtime configuration."""

from __future__ import annotations

import logging

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vinwatch.logic.cadence import CadenceFallback, CadencePolicy
from vinwatch.logic.normalize import parse_json_optional

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    order_url: str | None = None
    order_token: str | None = None
    order_brand_code: str | None = None
    order_api_key: str | None = None
    order_headers_json: str | None = None

    esp_provider: str = "smtp"
    smtp_host: str | None = None
    smtp_port: int | None = None
    smtp_user: str | None = None
    smtp_pass: str | None = None
    mail_from: str | None = None
    mail_to: str | None = None
    resend_api_key: str | None = None

    run_number: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("run_number", "RUN_NUMBER", "GITHUB_RUN_NUMBER"),
    )
    cadence_period: int = 3
    cadence_fallback: CadenceFallback = CadenceFallback.HOUR

    redis_url: str = "redis://redis:6379/0"
    check_minute: int = 0
    log_level: str = "INFO"

    @field_validator("smtp_port", mode="before")
    @classmethod
    def usable_port(cls, v):
        # an unusable port leaves the SMTP transport unconfigured
        if isinstance(v, bool):
            return None
        try:
            port = int(str(v).strip())
        except (TypeError, ValueError):
            return None
        return port if port > 0 else None

    @field_validator("cadence_fallback", mode="before")
    @classmethod
    def lower_fallback(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def extra_headers(self) -> dict[str, str]:
        if not self.order_headers_json:
            return {}
        parsed = parse_json_optional(self.order_headers_json)
        if not isinstance(parsed, dict):
            logger.warning("ORDER_HEADERS_JSON is not a JSON object; ignoring it")
            return {}
        return {str(k): str(v) for k, v in parsed.items()}

    def cadence_policy(self) -> CadencePolicy:
        return CadencePolicy(period=self.cadence_period, fallback=self.cadence_fallback)
