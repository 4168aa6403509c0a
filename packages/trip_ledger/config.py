"""Webhook settings for ``trip_ledger``.

Settings are plain values passed explicitly to the API functions; nothing in
the package reads them from a process-wide store. ``load_settings`` builds
them from environment variables (the CLI loads ``.env`` first):

- ``TRIP_LEDGER_WEBHOOK_BASE_URL``: base URL of the n8n webhook namespace.
- ``TRIP_LEDGER_TIMEOUT``: per-request timeout in seconds (default 10).
- ``TRIP_LEDGER_REFRESH_INTERVAL``: auto-refresh period in seconds (default 300).
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

DEFAULT_BASE_URL = "https://n8n.globaltripmarket.com/webhook"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_REFRESH_INTERVAL_SECONDS = 5 * 60.0


class ConfigError(ValueError):
    """Raised when environment configuration cannot be turned into settings."""


class WebhookSettings(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    base_url: str = DEFAULT_BASE_URL
    dashboard_path: str = "/dashboard-data"
    transaction_path: str = "/islem-ekle"
    chatbot_path: str = "/chatbot"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        if not v:
            raise ValueError("base_url must be non-empty")
        return v.rstrip("/")

    @field_validator("timeout_seconds", "refresh_interval_seconds")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be a positive number of seconds")
        return v

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @property
    def dashboard_url(self) -> str:
        return self._url(self.dashboard_path)

    @property
    def transaction_url(self) -> str:
        return self._url(self.transaction_path)

    @property
    def chatbot_url(self) -> str:
        return self._url(self.chatbot_path)


_ENV_FIELDS = {
    "TRIP_LEDGER_WEBHOOK_BASE_URL": "base_url",
    "TRIP_LEDGER_TIMEOUT": "timeout_seconds",
    "TRIP_LEDGER_REFRESH_INTERVAL": "refresh_interval_seconds",
}


def load_settings(environ: Mapping[str, str] | None = None) -> WebhookSettings:
    """Build :class:`WebhookSettings` from environment variables.

    Unset or blank variables fall back to defaults. Invalid values raise
    :class:`ConfigError` naming the offending variable.
    """

    env = os.environ if environ is None else environ
    values: dict[str, str] = {}
    for var, field in _ENV_FIELDS.items():
        raw = env.get(var)
        if raw is not None and raw.strip():
            values[field] = raw.strip()

    try:
        return WebhookSettings.model_validate(values)
    except ValidationError as e:
        bad = sorted(
            var
            for var, field in _ENV_FIELDS.items()
            if any(err.get("loc", ())[:1] == (field,) for err in e.errors())
        )
        raise ConfigError(f"invalid configuration in {', '.join(bad) or 'environment'}: {e}") from e


__all__ = ["ConfigError", "WebhookSettings", "load_settings"]
