import pytest

from telegram_api.models import InlineButton, InlineKeyboard, UpdateKind, parse_update
from telegram_api.results import Fail, Ok, interpret_response


def test_parse_message_update() -> None:
    update = parse_update(
        {
            "update_id": 10,
            "message": {
                "message_id": 3,
                "chat": {"id": 555},
                "from": {"id": 77, "username": "ann", "first_name": "Ann"},
                "text": "/start",
            },
        }
    )
    assert update.kind is UpdateKind.MESSAGE
    assert update.update_id == 10
    assert update.message.chat_id == 555
    assert update.message.user_id == 77
    assert update.message.username == "ann"
    assert update.message.text == "/start"
    assert update.callback_query is None


def test_message_without_text_has_empty_text() -> None:
    update = parse_update({"message": {"chat": {"id": 1}, "photo": [{"file_id": "x"}]}})
    assert update.message.text == ""
    assert update.message.username is None


def test_parse_callback_query_reads_data_field() -> None:
    update = parse_update(
        {"callback_query": {"id": 123, "data": "cart", "message": {"message_id": 4, "chat": {"id": 9}}}}
    )
    assert update.kind is UpdateKind.CALLBACK_QUERY
    assert update.callback_query.query_id == "123"
    assert update.callback_query.chat_id == 9
    assert update.callback_query.message_id == 4
    assert update.callback_query.data == "cart"


def test_parse_pre_checkout_query() -> None:
    update = parse_update({"pre_checkout_query": {"id": "pcq", "currency": "RUB", "total_amount": 100}})
    assert update.kind is UpdateKind.PRE_CHECKOUT_QUERY
    assert update.pre_checkout_query.query_id == "pcq"
    assert update.pre_checkout_query.total_amount == 100


def test_message_takes_precedence_over_other_variants() -> None:
    update = parse_update(
        {
            "message": {"chat": {"id": 1}, "text": "hi"},
            "callback_query": {"id": "c", "data": "cart"},
        }
    )
    assert update.kind is UpdateKind.MESSAGE


@pytest.mark.parametrize("raw", [{"update_id": 1}, {"message": None}, {"inline_query": {"id": "q"}}, [1], "text"])
def test_unrecognized_updates(raw) -> None:
    assert parse_update(raw).kind is UpdateKind.UNRECOGNIZED


def test_callback_query_requires_id() -> None:
    with pytest.raises(KeyError):
        parse_update({"callback_query": {"data": "cart"}})


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"url": "https://a", "callback_data": "x"},
        {"url": "https://a", "web_app_url": "https://b", "callback_data": "x"},
    ],
)
def test_button_needs_exactly_one_action(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InlineButton("label", **kwargs)


def test_keyboard_to_dict() -> None:
    keyboard = InlineKeyboard.of([InlineButton("Open", web_app_url="https://shop/shop")], [])
    assert keyboard.to_dict() == {"inline_keyboard": [[{"text": "Open", "web_app": {"url": "https://shop/shop"}}], []]}


@pytest.mark.parametrize(
    ("status", "body", "is_ok"),
    [
        (200, {"ok": True, "result": {}}, True),
        (200, {"ok": "true"}, False),
        (200, {"ok": False}, False),
        (201, {"ok": True}, False),
        (404, {"ok": False, "description": "Not Found"}, False),
        (200, None, False),
        (200, ["ok"], False),
    ],
)
def test_interpret_response_is_total(status: int, body, is_ok: bool) -> None:
    result = interpret_response("getMe", status, body)
    assert isinstance(result, Ok) is is_ok
    assert isinstance(result, Fail) is not is_ok
