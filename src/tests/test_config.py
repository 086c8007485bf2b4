import pytest

import config
from config import ConfigurationError, Settings, load_settings

ENV_NAMES = (
    "TELEGRAM_BOT_TOKEN",
    "WEBHOOK_URL",
    "APP_URL",
    "TELEGRAM_WEBHOOK_SECRET",
    "MINI_APP_BASE_URL",
    "TELEGRAM_API_BASE_URL",
    "TELEGRAM_CONNECT_TIMEOUT_SECONDS",
    "TELEGRAM_READ_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings()

    assert settings.telegram_bot_token == ""
    assert settings.webhook_url is None
    assert settings.telegram_webhook_secret is None
    assert settings.mini_app_url == "https://your-domain.com/shop"
    assert settings.api_base_url == "https://api.telegram.org"
    assert settings.connect_timeout_seconds == 10.0
    assert settings.read_timeout_seconds == 30.0
    assert settings.log_level == "INFO"
    assert settings.port == 8080


def test_values_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", " 123:abc ")
    monkeypatch.setenv("WEBHOOK_URL", "https://bot.example/")
    monkeypatch.setenv("TELEGRAM_WEBHOOK_SECRET", "s3cret")
    monkeypatch.setenv("MINI_APP_BASE_URL", "https://shop.example/")
    monkeypatch.setenv("TELEGRAM_CONNECT_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("PORT", "9000")

    settings = load_settings()

    assert settings.telegram_bot_token == "123:abc"
    assert settings.webhook_url == "https://bot.example/telegram/webhook"
    assert settings.telegram_webhook_secret == "s3cret"
    assert settings.mini_app_url == "https://shop.example/shop"
    assert settings.connect_timeout_seconds == 5.0
    assert settings.port == 9000


def test_app_url_is_webhook_fallback(monkeypatch) -> None:
    monkeypatch.setenv("APP_URL", "https://app.example")
    assert load_settings().webhook_url == "https://app.example/telegram/webhook"

    monkeypatch.setenv("WEBHOOK_URL", "https://hook.example")
    assert load_settings().webhook_url == "https://hook.example/telegram/webhook"


@pytest.mark.parametrize(("name", "value"), [("PORT", "eighty"), ("TELEGRAM_READ_TIMEOUT_SECONDS", "-1")])
def test_invalid_numbers_raise(monkeypatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError, match=name):
        load_settings()


def test_settings_are_frozen() -> None:
    settings = Settings(telegram_bot_token="x")
    with pytest.raises(AttributeError):
        settings.telegram_bot_token = "y"


@pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
def test_non_finite_timeouts_raise(monkeypatch, value: str) -> None:
    monkeypatch.setenv("TELEGRAM_CONNECT_TIMEOUT_SECONDS", value)
    with pytest.raises(ConfigurationError, match="TELEGRAM_CONNECT_TIMEOUT_SECONDS"):
        load_settings()


def test_log_level_is_normalized(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    assert load_settings().log_level == "DEBUG"


def test_unknown_log_level_raises(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ConfigurationError, match="Invalid LOG_LEVEL: LOUD"):
        load_settings()
