"""notifications_sdk.common.config

Configuration is read from environment variables only (optionally seeded from
a `.env` file). Nothing here talks to the network at import time; the clients
read `settings` lazily in their `from_settings` constructors.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv, find_dotenv

# Load variables from .env (if the file exists).
load_dotenv(find_dotenv())


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


@dataclass
class Settings:
    """
    Settings read from environment variables.

    Fields are grouped logically (endpoints, credentials, transport, logging).
    """

    # endpoints; the per-client values fall back to NOTIFICATIONS_BASE_URL
    base_url: str = os.getenv("NOTIFICATIONS_BASE_URL", "")
    manage_base_url: str = os.getenv("NOTIFICATIONS_MANAGE_BASE_URL", "")
    message_base_url: str = os.getenv("NOTIFICATIONS_MESSAGE_BASE_URL", "")

    # credentials
    auth_token: str = os.getenv("NOTIFICATIONS_AUTH_TOKEN", "")
    organization_id: str = os.getenv("NOTIFICATIONS_ORGANIZATION_ID", "")

    # "current" or "legacy"
    protocol: str = os.getenv("NOTIFICATIONS_PROTOCOL", "current")

    # transport; no timeout unless explicitly configured
    http_timeout_s: float | None = _optional_float("NOTIFICATIONS_HTTP_TIMEOUT_S")
    http_pool_conn: int = int(os.getenv("HTTP_POOL_CONN", "32"))
    http_pool_max: int = int(os.getenv("HTTP_POOL_MAX", "32"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def get_manage_base_url(self) -> str:
        return self.manage_base_url or self.base_url

    def get_message_base_url(self) -> str:
        return self.message_base_url or self.base_url


# Global settings instance used across the package.
settings = Settings()
