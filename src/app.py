from __future__ import annotations

import hmac
import logging

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from config import WEBHOOK_PATH, Settings, load_settings
from logging_config import configure_logging
from orchestration.dispatcher import UpdateDispatcher
from telegram_api.client import TelegramClient

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

_LOGGER = logging.getLogger("shopbot.app")


def _secret_matches(expected: str | None, received: str | None) -> bool:
    if not expected:
        return True
    return hmac.compare_digest(expected.encode("utf-8"), (received or "").encode("utf-8"))


def create_app(settings: Settings, dispatcher: UpdateDispatcher | None = None) -> FastAPI:
    if dispatcher is None:
        dispatcher = UpdateDispatcher(
            lambda: TelegramClient(settings),
            mini_app_url=settings.mini_app_url,
        )

    app = FastAPI(title="shopbot")
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    @app.post(WEBHOOK_PATH)
    async def telegram_webhook(request: Request) -> JSONResponse:
        if not _secret_matches(settings.telegram_webhook_secret, request.headers.get(SECRET_HEADER)):
            _LOGGER.warning("Rejected webhook call with a bad secret token")
            return JSONResponse(status_code=401, content={"error": "Unauthorized"})

        body = await request.body()
        status_code, content = await run_in_threadpool(dispatcher.dispatch, body)
        return JSONResponse(status_code=status_code, content=content)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


def main() -> None:
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)

    if not settings.telegram_bot_token:
        _LOGGER.warning("TELEGRAM_BOT_TOKEN is not set; webhook deliveries will fail")
    if not settings.telegram_webhook_secret:
        _LOGGER.info("TELEGRAM_WEBHOOK_SECRET not set; webhook secret check disabled")

    _LOGGER.info("Shop bot webhook listening on %s:%s%s", settings.host, settings.port, WEBHOOK_PATH)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
