"""Application entry point for the notifi command line client."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.alert_formatting import format_alerts, format_configuration, format_topic
from client import build_client
from core.client import NotifiClient
from core.errors import NotifiError
from core.models import FilterOptions, TargetSpec
from get_session import authorize

NAME = "NOTIFI"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def add_secret(self, secret: Optional[str]) -> None:
        if secret and secret not in self._secrets:
            self._secrets.append(secret)
            self._secrets.sort(key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> Optional[_RedactingFormatter]:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return None

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/notifi.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return None

    logging.basicConfig(level=level, handlers=handlers)
    return formatter


def _target_spec(args: argparse.Namespace) -> TargetSpec:
    return TargetSpec(
        email_address=args.email,
        phone_number=args.phone,
        telegram_id=args.telegram,
    )


async def _list_alerts(client: NotifiClient, args: argparse.Namespace) -> None:
    data = client.data
    # Disabled and partial mirrors may not hold alerts; read them from the service.
    if data is None or "alerts" not in client.mirror.retained:
        data = await client.fetch_data()
    print(format_alerts(data.alerts))


async def _create_alert(client: NotifiClient, args: argparse.Namespace) -> None:
    alert = await client.create_alert(
        name=args.name,
        source_id=args.source_id,
        filter_id=args.filter_id,
        target_spec=_target_spec(args),
        filter_options=FilterOptions(
            alert_frequency=args.frequency,
            direct_message_type=args.dm_type,
            threshold=args.threshold,
        ),
        group_name=args.group_name,
    )
    print(format_alerts([alert]))


async def _update_alert(client: NotifiClient, args: argparse.Namespace) -> None:
    alert = await client.update_alert(args.alert_id, _target_spec(args))
    print(format_alerts([alert]))


async def _delete_alert(client: NotifiClient, args: argparse.Namespace) -> None:
    deleted_id = await client.delete_alert(
        args.alert_id,
        keep_source_group=args.keep_source_group,
        keep_target_group=args.keep_target_group,
    )
    print(f"Deleted alert {deleted_id}")


async def _list_topics(client: NotifiClient, args: argparse.Namespace) -> None:
    topics = await client.get_topics()
    if not topics:
        print("No topics available.")
        return
    for topic in topics:
        print(format_topic(topic))


async def _verify_email(client: NotifiClient, args: argparse.Namespace) -> None:
    request_id = await client.send_email_target_verification(args.target_id)
    print(f"Verification email requested ({request_id})")


async def _show_dapp_config(client: NotifiClient, args: argparse.Namespace) -> None:
    print(format_configuration(await client.get_configuration()))


_COMMANDS = {
    "alerts": _list_alerts,
    "create-alert": _create_alert,
    "update-alert": _update_alert,
    "delete-alert": _delete_alert,
    "topics": _list_topics,
    "verify-email": _verify_email,
    "dapp-config": _show_dapp_config,
}

# Dapp configuration is public; everything else needs a session token.
_ANONYMOUS_COMMANDS = {"dapp-config"}


async def _run(args: argparse.Namespace, formatter: Optional[_RedactingFormatter]) -> None:
    client = build_client()
    try:
        if args.command not in _ANONYMOUS_COMMANDS:
            await authorize(client)
            if formatter is not None:
                formatter.add_secret(client.auth.token)
        await _COMMANDS[args.command](client, args)
    finally:
        if client.auth.is_authenticated:
            client.log_out()
        await client.service.close()


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--email", help="Email address to notify")
    parser.add_argument("--phone", help="Phone number to notify (international format)")
    parser.add_argument("--telegram", help="Telegram id to notify")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="notifi")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("alerts", help="List configured alerts")

    create = subparsers.add_parser("create-alert", help="Create an alert")
    create.add_argument("--name", required=True)
    create.add_argument("--source-id", required=True)
    create.add_argument("--filter-id", required=True)
    create.add_argument("--group-name")
    create.add_argument("--frequency", help="alertFrequency filter option")
    create.add_argument("--dm-type", help="directMessageType filter option")
    create.add_argument("--threshold", type=float, help="threshold filter option")
    _add_target_arguments(create)

    update = subparsers.add_parser("update-alert", help="Replace an alert's targets")
    update.add_argument("--alert-id", required=True)
    _add_target_arguments(update)

    delete = subparsers.add_parser("delete-alert", help="Delete an alert and its groups")
    delete.add_argument("--alert-id", required=True)
    delete.add_argument("--keep-source-group", action="store_true")
    delete.add_argument("--keep-target-group", action="store_true")

    subparsers.add_parser("topics", help="List broadcast topics (requires UserMessenger)")

    verify = subparsers.add_parser("verify-email", help="Resend an email target verification")
    verify.add_argument("--target-id", required=True)

    subparsers.add_parser("dapp-config", help="Show the dapp's client configuration")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = _build_parser().parse_args(argv)

    _print_banner()
    formatter = _configure_logging()

    try:
        asyncio.run(_run(args, formatter))
    except NotifiError as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
