from __future__ import annotations

import json
import logging
from typing import Any, Iterable

import requests

from config import ConfigurationError, Settings

from .models import (
    BotCommand,
    InlineKeyboard,
    InvoiceOptions,
    LabeledPrice,
    MessageOptions,
    WebhookOptions,
)
from .results import TRANSPORT_FAILURE, ApiResult, Fail, Ok, interpret_response

_LOGGER = logging.getLogger("shopbot.client")

Keyboard = InlineKeyboard | dict[str, Any]


def _encode_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False)
    return value


def encode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Flatten a payload into Bot API form fields.

    None values are dropped, booleans become "true"/"false" and nested
    structures are embedded as JSON text.
    """
    return {key: _encode_value(value) for key, value in fields.items() if value is not None}


def _keyboard_dict(keyboard: Keyboard | None) -> dict[str, Any] | None:
    if keyboard is None:
        return None
    if isinstance(keyboard, InlineKeyboard):
        return keyboard.to_dict()
    return keyboard


class TelegramClient:
    def __init__(self, settings: Settings) -> None:
        token = (settings.telegram_bot_token or "").strip()
        if not token:
            raise ConfigurationError("Missing required environment variable: TELEGRAM_BOT_TOKEN")
        self._token = token
        self._base_url = f"{settings.api_base_url.rstrip('/')}/bot{token}"
        self._timeout = (settings.connect_timeout_seconds, settings.read_timeout_seconds)

    def _url(self, method: str) -> str:
        return f"{self._base_url}/{method}"

    def _redact(self, text: str) -> str:
        # urllib3 error messages include the request path, which carries the token.
        return text.replace(self._token, "<token>")

    def _call(
        self,
        method: str,
        fields: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> ApiResult:
        data = encode_fields(fields or {})
        _LOGGER.debug("Calling Telegram %s", method)
        try:
            response = requests.post(
                self._url(method),
                data=data,
                files=files,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            description = self._redact(str(exc)) or exc.__class__.__name__
            _LOGGER.warning("Telegram %s transport failure: %s", method, description)
            return Fail(method=method, status=TRANSPORT_FAILURE, description=description)

        try:
            body = response.json()
        except ValueError:
            body = {}

        result = interpret_response(method, response.status_code, body)
        if not result.ok:
            _LOGGER.warning(
                "Telegram %s failed (HTTP %s): %s",
                method,
                result.status,
                result.description,
            )
        return result

    def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Keyboard | None = None,
        options: MessageOptions | None = None,
    ) -> ApiResult:
        fields: dict[str, Any] = {"chat_id": chat_id, "text": text}
        fields.update((options or MessageOptions()).to_fields())
        fields["reply_markup"] = _keyboard_dict(keyboard)
        return self._call("sendMessage", fields)

    def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        keyboard: Keyboard | None = None,
    ) -> ApiResult:
        return self._call(
            "editMessageText",
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "text": text,
                "parse_mode": "HTML",
                "reply_markup": _keyboard_dict(keyboard),
            },
        )

    def delete_message(self, chat_id: int, message_id: int) -> ApiResult:
        return self._call("deleteMessage", {"chat_id": chat_id, "message_id": message_id})

    def _send_media(
        self,
        method: str,
        media_field: str,
        chat_id: int,
        media: str,
        caption: str | None,
        keyboard: Keyboard | None,
    ) -> ApiResult:
        return self._call(
            method,
            {
                "chat_id": chat_id,
                media_field: media,
                "caption": caption,
                "parse_mode": "HTML",
                "reply_markup": _keyboard_dict(keyboard),
            },
        )

    def send_photo(
        self,
        chat_id: int,
        photo: str,
        caption: str | None = None,
        keyboard: Keyboard | None = None,
    ) -> ApiResult:
        return self._send_media("sendPhoto", "photo", chat_id, photo, caption, keyboard)

    def send_document(
        self,
        chat_id: int,
        document: str,
        caption: str | None = None,
        keyboard: Keyboard | None = None,
    ) -> ApiResult:
        return self._send_media("sendDocument", "document", chat_id, document, caption, keyboard)

    def answer_callback_query(
        self,
        query_id: str,
        text: str | None = None,
        show_alert: bool = False,
    ) -> ApiResult:
        return self._call(
            "answerCallbackQuery",
            {"callback_query_id": query_id, "text": text, "show_alert": show_alert},
        )

    def send_invoice(
        self,
        chat_id: int,
        title: str,
        description: str,
        payload: str,
        provider_token: str,
        prices: Iterable[LabeledPrice],
        options: InvoiceOptions | None = None,
    ) -> ApiResult:
        fields: dict[str, Any] = {
            "chat_id": chat_id,
            "title": title,
            "description": description,
            "payload": payload,
            "provider_token": provider_token,
            "prices": [price.to_dict() for price in prices],
        }
        fields.update((options or InvoiceOptions()).to_fields())
        return self._call("sendInvoice", fields)

    def answer_pre_checkout_query(
        self,
        query_id: str,
        ok: bool,
        error_message: str | None = None,
    ) -> ApiResult:
        fields: dict[str, Any] = {"pre_checkout_query_id": query_id, "ok": ok}
        if not ok and error_message:
            fields["error_message"] = error_message
        return self._call("answerPreCheckoutQuery", fields)

    def set_webhook(self, url: str, options: WebhookOptions | None = None) -> ApiResult:
        options = options or WebhookOptions()
        fields: dict[str, Any] = {"url": url}
        fields.update(options.to_fields())
        files = None
        if options.certificate is not None:
            files = {"certificate": ("certificate.pem", options.certificate)}
        return self._call("setWebhook", fields, files=files)

    def delete_webhook(self, drop_pending_updates: bool = True) -> ApiResult:
        return self._call("deleteWebhook", {"drop_pending_updates": drop_pending_updates})

    def get_webhook_info(self) -> ApiResult:
        return self._call("getWebhookInfo")

    def get_me(self) -> ApiResult:
        return self._call("getMe")

    def set_my_commands(self, commands: Iterable[BotCommand]) -> ApiResult:
        return self._call("setMyCommands", {"commands": [c.to_dict() for c in commands]})

    def validate_token(self) -> bool:
        try:
            result = self.get_me()
        except Exception:
            _LOGGER.exception("Token validation raised")
            return False
        return isinstance(result, Ok) and isinstance(result.payload, dict) and bool(result.payload.get("id"))
