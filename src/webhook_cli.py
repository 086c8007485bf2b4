"""Operator commands for the bot's Telegram webhook.

Run with: python src/webhook_cli.py [set|delete|info|commands|test]
"""
from __future__ import annotations

import argparse
from datetime import datetime, timezone
import json
import sys
from typing import Any, Callable

from config import ConfigurationError, Settings, load_settings
from logging_config import configure_logging
from orchestration.replies import BOT_COMMANDS
from telegram_api.client import TelegramClient
from telegram_api.models import WebhookOptions
from telegram_api.results import TelegramError

ACTIONS = ("set", "delete", "info", "commands", "test")


def _yes_no(value: Any) -> str:
    return "yes" if value else "no"


def _error(message: str) -> int:
    print(f"[ERROR] {message}")
    return 1


def set_webhook(client: TelegramClient, settings: Settings) -> int:
    url = settings.webhook_url
    if not url:
        return _error("WEBHOOK_URL (or APP_URL) is not set")

    print(f"[INFO] Setting webhook: {url}")
    if settings.telegram_webhook_secret:
        print("[INFO] Using a secret token for webhook calls")
    client.set_webhook(url, WebhookOptions(secret_token=settings.telegram_webhook_secret)).raise_for_error()
    print("[SUCCESS] Webhook set")
    print()
    return webhook_info(client, settings)


def delete_webhook(client: TelegramClient, settings: Settings) -> int:
    print("[INFO] Deleting webhook...")
    client.delete_webhook(True).raise_for_error()
    print("[SUCCESS] Webhook deleted")
    return 0


def webhook_info(client: TelegramClient, settings: Settings) -> int:
    info = client.get_webhook_info().raise_for_error().payload or {}
    print("Webhook info:")
    print(f"URL: {info.get('url') or 'not set'}")
    print(f"Custom certificate: {_yes_no(info.get('has_custom_certificate'))}")
    print(f"Pending updates: {info.get('pending_update_count', 0)}")
    print(f"IP address: {info.get('ip_address') or 'unknown'}")
    print(f"Max connections: {info.get('max_connections') or 'not specified'}")
    print(f"Allowed updates: {json.dumps(info.get('allowed_updates') or [])}")
    if info.get("last_error_date"):
        last_error = datetime.fromtimestamp(info["last_error_date"], tz=timezone.utc)
        print(f"Last error: {last_error:%Y-%m-%d %H:%M:%S} UTC")
        print(f"Error message: {info.get('last_error_message', '')}")
    return 0


def set_commands(client: TelegramClient, settings: Settings) -> int:
    print("[INFO] Setting bot commands...")
    client.set_my_commands(BOT_COMMANDS).raise_for_error()
    print("[SUCCESS] Bot commands set:")
    for command in BOT_COMMANDS:
        print(f"  /{command.command} - {command.description}")
    return 0


def check_bot(client: TelegramClient, settings: Settings) -> int:
    print("[INFO] Testing bot...")
    if not client.validate_token():
        return _error("Invalid bot token")

    bot = client.get_me().raise_for_error().payload
    print("[SUCCESS] Bot is working")
    print(f"Name: {bot.get('first_name')}")
    print(f"Username: @{bot.get('username')}")
    print(f"ID: {bot.get('id')}")
    print(f"Can join groups: {_yes_no(bot.get('can_join_groups'))}")
    print(f"Can read all group messages: {_yes_no(bot.get('can_read_all_group_messages'))}")
    print(f"Supports inline queries: {_yes_no(bot.get('supports_inline_queries'))}")
    return 0


HANDLERS: dict[str, Callable[[TelegramClient, Settings], int]] = {
    "set": set_webhook,
    "delete": delete_webhook,
    "info": webhook_info,
    "commands": set_commands,
    "test": check_bot,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage the Telegram webhook for the shop bot",
        epilog=(
            "environment: TELEGRAM_BOT_TOKEN (required), WEBHOOK_URL or APP_URL, "
            "TELEGRAM_WEBHOOK_SECRET (optional)"
        ),
    )
    parser.add_argument("action", nargs="?", default="set", choices=ACTIONS)
    return parser


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings or load_settings()
        configure_logging(settings.log_level)
        client = TelegramClient(settings)
    except ConfigurationError as exc:
        return _error(str(exc))

    try:
        return HANDLERS[args.action](client, settings)
    except TelegramError as exc:
        return _error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
