from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import html

from telegram_api.models import BotCommand, InlineButton, InlineKeyboard


class Route(str, Enum):
    START = "start"
    HELP = "help"
    CATALOG = "catalog"
    CART = "cart"
    ORDERS = "orders"


COMMAND_ROUTES: dict[str, Route] = {
    "/start": Route.START,
    "/help": Route.HELP,
    "/catalog": Route.CATALOG,
    "/cart": Route.CART,
    "/orders": Route.ORDERS,
}

CALLBACK_ROUTES: dict[str, Route] = {
    "catalog": Route.CATALOG,
    "cart": Route.CART,
    "orders": Route.ORDERS,
    "help": Route.HELP,
    "back_to_menu": Route.START,
}

BOT_COMMANDS: tuple[BotCommand, ...] = (
    BotCommand("start", "Start the bot and open the main menu"),
    BotCommand("help", "Show help"),
    BotCommand("catalog", "Browse the product catalog"),
    BotCommand("cart", "Show your cart"),
    BotCommand("orders", "Show your order history"),
)


@dataclass(frozen=True)
class Reply:
    text: str
    keyboard: InlineKeyboard | None = None


def _shop_button(mini_app_url: str) -> InlineButton:
    return InlineButton("🛒 Open shop", web_app_url=mini_app_url)


def _section_keyboard(mini_app_url: str) -> InlineKeyboard:
    return InlineKeyboard.of(
        [_shop_button(mini_app_url)],
        [InlineButton("⬅️ Back", callback_data="back_to_menu")],
    )


def start_reply(mini_app_url: str) -> Reply:
    return Reply(
        text="🛍️ Welcome to our online shop!\n\nChoose an action:",
        keyboard=InlineKeyboard.of(
            [_shop_button(mini_app_url)],
            [
                InlineButton("📱 Catalog", callback_data="catalog"),
                InlineButton("🛍️ Cart", callback_data="cart"),
            ],
            [
                InlineButton("📦 My orders", callback_data="orders"),
                InlineButton("❓ Help", callback_data="help"),
            ],
        ),
    )


def help_reply(mini_app_url: str) -> Reply:
    lines = ["📋 Available commands:", ""]
    lines.extend(f"/{command.command} - {command.description}" for command in BOT_COMMANDS)
    lines.extend(["", "Or tap 'Open shop' for the full interface!"])
    return Reply(text="\n".join(lines))


def catalog_reply(mini_app_url: str) -> Reply:
    return Reply(
        text=(
            "📱 Product catalog:\n\n"
            "The catalog is under construction.\n"
            "Tap 'Open shop' to browse products!"
        ),
        keyboard=_section_keyboard(mini_app_url),
    )


# TODO: list real cart and order contents once a storage backend exists.
def cart_reply(mini_app_url: str) -> Reply:
    return Reply(
        text="🛍️ Your cart:\n\nYour cart is empty.\nAdd products through our shop!",
        keyboard=_section_keyboard(mini_app_url),
    )


def orders_reply(mini_app_url: str) -> Reply:
    return Reply(
        text="📦 Your orders:\n\nYou have no orders yet.\nPlace your first order in our shop!",
        keyboard=_section_keyboard(mini_app_url),
    )


ROUTE_REPLIES = {
    Route.START: start_reply,
    Route.HELP: help_reply,
    Route.CATALOG: catalog_reply,
    Route.CART: cart_reply,
    Route.ORDERS: orders_reply,
}


def compose(route: Route, mini_app_url: str) -> Reply:
    return ROUTE_REPLIES[route](mini_app_url)


def unknown_command_reply() -> Reply:
    return Reply(
        text=(
            "🤖 I don't understand that command.\n\n"
            "Use /help for the list of commands or /start for the main menu."
        )
    )


def unknown_action_reply(data: str) -> Reply:
    return Reply(text=f"Unknown action: {html.escape(data)}")
