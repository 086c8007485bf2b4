import json
import logging

import pytest

from config import ConfigurationError
from logging_config import configure_logging
from orchestration.dispatcher import UpdateDispatcher
from telegram_api.results import Ok


class QuietClient:
    def send_message(self, chat_id: int, text: str, keyboard=None):
        return Ok(method="sendMessage", payload=True)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _json_lines(err: str) -> list[dict]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


def test_extra_context_is_emitted(capsys) -> None:
    configure_logging("info")
    dispatcher = UpdateDispatcher(QuietClient, mini_app_url="https://shop.example/shop")
    body = {"update_id": 8, "message": {"chat": {"id": 424242}, "from": {"id": 7}, "text": "/help"}}

    assert dispatcher.dispatch(json.dumps(body).encode()) == (200, {"ok": True})

    records = _json_lines(capsys.readouterr().err)
    received = [r for r in records if r["message"] == "Message received"]
    assert len(received) == 1
    assert received[0]["chat_id"] == 424242
    assert received[0]["user_id"] == 7
    assert received[0]["route"] == "help"
    assert received[0]["name"] == "shopbot.dispatcher"
    assert received[0]["levelname"] == "INFO"


def test_level_filters_records(capsys) -> None:
    configure_logging("WARNING")
    logging.getLogger("shopbot.test").info("hidden")
    logging.getLogger("shopbot.test").warning("shown")

    messages = [r["message"] for r in _json_lines(capsys.readouterr().err)]
    assert messages == ["shown"]


def test_unknown_level_is_configuration_error() -> None:
    root = logging.getLogger()
    handlers = list(root.handlers)

    with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
        configure_logging("LOUD")
    assert root.handlers == handlers
