from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv

WEBHOOK_PATH = "/telegram/webhook"
MINI_APP_PATH = "/shop"


@dataclass(frozen=True)
class Settings:
    telegram_bot_token: str
    webhook_base_url: str | None = None
    telegram_webhook_secret: str | None = None
    mini_app_base_url: str = "https://your-domain.com"
    api_base_url: str = "https://api.telegram.org"
    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080

    @property
    def webhook_url(self) -> str | None:
        if not self.webhook_base_url:
            return None
        return self.webhook_base_url.rstrip("/") + WEBHOOK_PATH

    @property
    def mini_app_url(self) -> str:
        return self.mini_app_base_url.rstrip("/") + MINI_APP_PATH


class ConfigurationError(ValueError):
    pass


def _optional_env(name: str) -> str | None:
    return os.getenv(name, "").strip() or None


def parse_log_level(raw: str) -> int:
    name = raw.strip().upper()
    level = logging.getLevelName(name)
    if not name or not isinstance(level, int):
        raise ConfigurationError(f"Invalid LOG_LEVEL: {raw}")
    return level


def _number_env(name: str, default: str, cast: type = float) -> float:
    raw = os.getenv(name, "").strip() or default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid numeric value for {name}: {raw}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {raw}")
    return value


def _log_level_env() -> str:
    raw = os.getenv("LOG_LEVEL", "").strip() or "INFO"
    parse_log_level(raw)
    return raw.upper()


def load_settings() -> Settings:
    """Read settings from the process environment (and a local .env file).

    The bot token is not required here; the Telegram client rejects an empty
    token when it is constructed.
    """
    load_dotenv()

    return Settings(
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", "").strip(),
        webhook_base_url=_optional_env("WEBHOOK_URL") or _optional_env("APP_URL"),
        telegram_webhook_secret=_optional_env("TELEGRAM_WEBHOOK_SECRET"),
        mini_app_base_url=_optional_env("MINI_APP_BASE_URL") or "https://your-domain.com",
        api_base_url=_optional_env("TELEGRAM_API_BASE_URL") or "https://api.telegram.org",
        connect_timeout_seconds=_number_env("TELEGRAM_CONNECT_TIMEOUT_SECONDS", "10"),
        read_timeout_seconds=_number_env("TELEGRAM_READ_TIMEOUT_SECONDS", "30"),
        log_level=_log_level_env(),
        host=_optional_env("HOST") or "0.0.0.0",
        port=_number_env("PORT", "8080", int),
    )
