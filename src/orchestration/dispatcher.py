from __future__ import annotations

import json
import logging
from typing import Any, Callable, Protocol

from telegram_api.models import (
    CallbackQuery,
    InlineKeyboard,
    Message,
    PreCheckoutQuery,
    Update,
    UpdateKind,
    parse_update,
)
from telegram_api.results import ApiResult

from .replies import (
    CALLBACK_ROUTES,
    COMMAND_ROUTES,
    Reply,
    compose,
    unknown_action_reply,
    unknown_command_reply,
)

_LOGGER = logging.getLogger("shopbot.dispatcher")

INVALID_JSON = {"error": "Invalid JSON"}
INTERNAL_ERROR = {"error": "Internal server error"}
ACKNOWLEDGED = {"ok": True}


class BotClient(Protocol):
    def send_message(self, chat_id: int, text: str, keyboard: InlineKeyboard | None = None) -> ApiResult:
        ...

    def answer_callback_query(self, query_id: str) -> ApiResult:
        ...

    def answer_pre_checkout_query(self, query_id: str, ok: bool) -> ApiResult:
        ...


class MalformedInputError(ValueError):
    pass


def decode_body(raw_body: bytes) -> Any:
    try:
        decoded = json.loads(raw_body)
    except ValueError as exc:
        raise MalformedInputError("Body is not valid JSON") from exc
    if not decoded:
        raise MalformedInputError("Body decoded to an empty value")
    return decoded


class UpdateDispatcher:
    """Routes one webhook delivery to a handler and acknowledges it.

    The client factory is called once per delivery, and only after the body
    decodes to a non-empty object. Outbound calls that return Fail are logged
    and do not change the acknowledgement; only exceptions raised while
    handling turn into a 500.
    """

    def __init__(self, client_factory: Callable[[], BotClient], *, mini_app_url: str) -> None:
        self._client_factory = client_factory
        self._mini_app_url = mini_app_url

    def dispatch(self, raw_body: bytes) -> tuple[int, dict[str, Any]]:
        try:
            raw_update = decode_body(raw_body)
        except MalformedInputError as exc:
            _LOGGER.warning("Rejected webhook body: %s", exc)
            return 400, dict(INVALID_JSON)

        try:
            update = parse_update(raw_update)
            self._handle(update)
        except Exception:
            _LOGGER.exception("Webhook update handling failed")
            return 500, dict(INTERNAL_ERROR)
        return 200, dict(ACKNOWLEDGED)

    def _handle(self, update: Update) -> None:
        if update.kind is UpdateKind.UNRECOGNIZED:
            _LOGGER.info("Ignoring unrecognized update", extra={"update_id": update.update_id})
            return

        client = self._client_factory()
        if update.kind is UpdateKind.MESSAGE:
            self._handle_message(client, update.message)
        elif update.kind is UpdateKind.CALLBACK_QUERY:
            self._handle_callback_query(client, update.callback_query)
        elif update.kind is UpdateKind.PRE_CHECKOUT_QUERY:
            self._handle_pre_checkout_query(client, update.pre_checkout_query)
        else:
            raise ValueError(f"Unhandled update kind: {update.kind}")

    def _send_reply(self, client: BotClient, chat_id: int, reply: Reply) -> None:
        result = client.send_message(chat_id, reply.text, keyboard=reply.keyboard)
        if not result.ok:
            _LOGGER.debug(
                "Reply was not delivered (HTTP %s): %s",
                result.status,
                result.description,
                extra={"chat_id": chat_id},
            )

    def _handle_message(self, client: BotClient, message: Message) -> None:
        route = COMMAND_ROUTES.get(message.text)
        _LOGGER.info(
            "Message received",
            extra={
                "chat_id": message.chat_id,
                "user_id": message.user_id,
                "route": route.value if route else None,
            },
        )
        if route is None:
            reply = unknown_command_reply()
        else:
            reply = compose(route, self._mini_app_url)
        self._send_reply(client, message.chat_id, reply)

    def _handle_callback_query(self, client: BotClient, query: CallbackQuery) -> None:
        answer = client.answer_callback_query(query.query_id)
        if not answer.ok:
            _LOGGER.debug(
                "Callback query %s was not answered: %s", query.query_id, answer.description
            )

        if query.chat_id is None:
            _LOGGER.info("Callback query %s has no originating chat", query.query_id)
            return

        route = CALLBACK_ROUTES.get(query.data)
        if route is None:
            reply = unknown_action_reply(query.data)
        else:
            reply = compose(route, self._mini_app_url)
        self._send_reply(client, query.chat_id, reply)

    def _handle_pre_checkout_query(self, client: BotClient, query: PreCheckoutQuery) -> None:
        # Every checkout is accepted until orders and stock can be checked against storage.
        result = client.answer_pre_checkout_query(query.query_id, True)
        if not result.ok:
            _LOGGER.debug(
                "Pre-checkout query %s was not answered: %s", query.query_id, result.description
            )
