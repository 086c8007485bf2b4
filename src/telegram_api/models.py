from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_ALLOWED_UPDATES = ("message", "callback_query", "pre_checkout_query")


class UpdateKind(str, Enum):
    MESSAGE = "message"
    CALLBACK_QUERY = "callback_query"
    PRE_CHECKOUT_QUERY = "pre_checkout_query"
    UNRECOGNIZED = "unrecognized"


# Inbound


@dataclass(frozen=True)
class Message:
    chat_id: int
    message_id: int | None
    user_id: int | None
    username: str | None
    first_name: str | None
    text: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Message":
        chat = raw.get("chat") or {}
        from_user = raw.get("from") or {}
        return cls(
            chat_id=int(chat["id"]),
            message_id=raw.get("message_id"),
            user_id=from_user.get("id"),
            username=from_user.get("username"),
            first_name=from_user.get("first_name"),
            text=raw.get("text") or "",
        )


@dataclass(frozen=True)
class CallbackQuery:
    query_id: str
    chat_id: int | None
    message_id: int | None
    user_id: int | None
    data: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "CallbackQuery":
        # Inline-mode callbacks carry no message, so there is no chat to reply to.
        message = raw.get("message") or {}
        chat = message.get("chat") or {}
        from_user = raw.get("from") or {}
        chat_id = chat.get("id")
        return cls(
            query_id=str(raw["id"]),
            chat_id=int(chat_id) if chat_id is not None else None,
            message_id=message.get("message_id"),
            user_id=from_user.get("id"),
            data=raw.get("data") or "",
        )


@dataclass(frozen=True)
class PreCheckoutQuery:
    query_id: str
    currency: str | None = None
    total_amount: int | None = None
    invoice_payload: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "PreCheckoutQuery":
        return cls(
            query_id=str(raw["id"]),
            currency=raw.get("currency"),
            total_amount=raw.get("total_amount"),
            invoice_payload=raw.get("invoice_payload"),
        )


@dataclass(frozen=True)
class Update:
    update_id: int | None
    kind: UpdateKind
    message: Message | None = None
    callback_query: CallbackQuery | None = None
    pre_checkout_query: PreCheckoutQuery | None = None


def _populated(raw: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = raw.get(key)
    if isinstance(value, dict) and value:
        return value
    return None


def parse_update(raw: Any) -> Update:
    """Decode one Telegram update into exactly one variant.

    Keys are checked in a fixed order: message, callback_query,
    pre_checkout_query. Anything else (edited messages, channel posts,
    non-object JSON) becomes an UNRECOGNIZED update. A recognized variant
    missing its required ids raises KeyError.
    """
    if not isinstance(raw, dict):
        return Update(None, UpdateKind.UNRECOGNIZED)
    update_id = raw.get("update_id")

    message = _populated(raw, "message")
    if message is not None:
        return Update(update_id, UpdateKind.MESSAGE, message=Message.from_dict(message))

    callback = _populated(raw, "callback_query")
    if callback is not None:
        return Update(
            update_id,
            UpdateKind.CALLBACK_QUERY,
            callback_query=CallbackQuery.from_dict(callback),
        )

    pre_checkout = _populated(raw, "pre_checkout_query")
    if pre_checkout is not None:
        return Update(
            update_id,
            UpdateKind.PRE_CHECKOUT_QUERY,
            pre_checkout_query=PreCheckoutQuery.from_dict(pre_checkout),
        )

    return Update(update_id, UpdateKind.UNRECOGNIZED)


# Outbound


@dataclass(frozen=True)
class InlineButton:
    text: str
    url: str | None = None
    web_app_url: str | None = None
    callback_data: str | None = None

    def __post_init__(self) -> None:
        actions = [a for a in (self.url, self.web_app_url, self.callback_data) if a is not None]
        if len(actions) != 1:
            raise ValueError(
                f'Button "{self.text}" needs exactly one of url, web_app_url or callback_data'
            )

    def to_dict(self) -> dict[str, Any]:
        button: dict[str, Any] = {"text": self.text}
        if self.url is not None:
            button["url"] = self.url
        elif self.web_app_url is not None:
            button["web_app"] = {"url": self.web_app_url}
        else:
            button["callback_data"] = self.callback_data
        return button


@dataclass(frozen=True)
class InlineKeyboard:
    rows: tuple[tuple[InlineButton, ...], ...] = ()

    @classmethod
    def of(cls, *rows: list[InlineButton] | tuple[InlineButton, ...]) -> "InlineKeyboard":
        return cls(tuple(tuple(row) for row in rows))

    def buttons(self) -> list[InlineButton]:
        return [button for row in self.rows for button in row]

    def to_dict(self) -> dict[str, Any]:
        return {"inline_keyboard": [[button.to_dict() for button in row] for row in self.rows]}


@dataclass(frozen=True)
class BotCommand:
    command: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"command": self.command, "description": self.description}


@dataclass(frozen=True)
class LabeledPrice:
    label: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "amount": self.amount}


@dataclass(frozen=True)
class MessageOptions:
    parse_mode: str | None = "HTML"
    disable_web_page_preview: bool = False
    disable_notification: bool = False

    def to_fields(self) -> dict[str, Any]:
        return {
            "parse_mode": self.parse_mode,
            "disable_web_page_preview": self.disable_web_page_preview,
            "disable_notification": self.disable_notification,
        }


@dataclass(frozen=True)
class InvoiceOptions:
    currency: str = "RUB"
    start_parameter: str | None = "shop"
    photo_url: str | None = None
    photo_size: int | None = None
    photo_width: int | None = None
    photo_height: int | None = None
    need_name: bool = True
    need_phone_number: bool = True
    need_email: bool = False
    need_shipping_address: bool = False
    send_phone_number_to_provider: bool = False
    send_email_to_provider: bool = False
    is_flexible: bool = False

    def to_fields(self) -> dict[str, Any]:
        return {
            "currency": self.currency,
            "start_parameter": self.start_parameter,
            "photo_url": self.photo_url,
            "photo_size": self.photo_size,
            "photo_width": self.photo_width,
            "photo_height": self.photo_height,
            "need_name": self.need_name,
            "need_phone_number": self.need_phone_number,
            "need_email": self.need_email,
            "need_shipping_address": self.need_shipping_address,
            "send_phone_number_to_provider": self.send_phone_number_to_provider,
            "send_email_to_provider": self.send_email_to_provider,
            "is_flexible": self.is_flexible,
        }


@dataclass(frozen=True)
class WebhookOptions:
    max_connections: int = 40
    allowed_updates: tuple[str, ...] = field(default=DEFAULT_ALLOWED_UPDATES)
    drop_pending_updates: bool = True
    certificate: bytes | None = None
    secret_token: str | None = None

    def to_fields(self) -> dict[str, Any]:
        # The certificate is uploaded as a file, not a form field.
        return {
            "max_connections": self.max_connections,
            "allowed_updates": list(self.allowed_updates),
            "drop_pending_updates": self.drop_pending_updates,
            "secret_token": self.secret_token,
        }
