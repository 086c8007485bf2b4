from __future__ import annotations

import logging

from pythonjsonlogger import jsonlogger

from config import parse_log_level

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one JSON stream handler on the root logger.

    Fields passed through ``extra=`` (chat_id, update_id, ...) end up as keys
    of the emitted JSON object. Raises ConfigurationError for an unknown level.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(parse_log_level(level))
    root.handlers = [handler]

    # requests logs full URLs at DEBUG, and those carry the bot token.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
