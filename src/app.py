"""Application entry point for the signal relay."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from telethon import events

import settings
from adapters.audit_log import AuditLog
from adapters.dexscreener import DexScreenerPairResolver
from adapters.discord_webhook import DiscordWebhookNotifier
from adapters.telegram_mapper import format_target_label, resolve_chat_id, to_inbound
from client import build_client
from core.config import RelayConfig
from core.dispatcher import SequentialDispatcher
from core.errors import AuthorizationError, ChatResolutionError, ConfigError
from core.relay import SignalRelay
from get_session import CredentialProvider, authorize, build_credentials, save_session_if_changed

NAME = "SIGNALRELAY"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _SecretMaskingFormatter(logging.Formatter):
    """Mask the values of the named environment variables in every record."""

    def __init__(self, env_names: list[str]) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S")
        values = {os.getenv(name) for name in env_names} - {None, ""}
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted(values, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    redact = config.get("redact", {})
    formatter = _SecretMaskingFormatter(redact.get("patterns", []) if redact.get("enabled") else [])

    handlers: list[logging.Handler] = []
    if config.get("console", True):
        handlers.append(logging.StreamHandler())

    log_file = config.get("file", {})
    if log_file.get("enabled", False):
        path = settings.resolve_path(log_file.get("path", "logs/signalrelay.log"))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=int(log_file.get("max_bytes", 5 * 1024 * 1024)),
                backupCount=int(log_file.get("backup_count", 5)),
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
    if handlers:
        level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
        logging.basicConfig(level=level, handlers=handlers)


def _load_config(require_targets: bool = True) -> RelayConfig:
    try:
        return settings.load_relay_config(require_targets=require_targets)
    except ConfigError as exc:
        print(f"Error: {settings.REQUIRED_MESSAGE}", file=sys.stderr)
        for problem in exc.problems:
            print(f"  - {problem}", file=sys.stderr)
        raise SystemExit(1) from exc


async def _listen(client, config: RelayConfig, audit: AuditLog) -> None:
    logger = logging.getLogger(__name__)

    try:
        target_chat_id = await resolve_chat_id(client, config.target_chat)
    except Exception as exc:
        message = (
            f"Could not find the chat for username: {config.target_chat}. "
            "Please check the username and try again."
        )
        logger.exception(message)
        audit.record(f"ERROR: {message}")
        audit.record(f"ERROR DETAILS: {exc}")
        raise ChatResolutionError(message) from exc

    logger.info("Now listening for new messages from: %s (ID: %s)", config.target_chat, target_chat_id)
    audit.record(f"Listening for messages from: {config.target_chat} (ID: {target_chat_id})")

    relay = SignalRelay(
        target_chat_id=target_chat_id,
        source_label=format_target_label(config.target_chat),
        resolver=DexScreenerPairResolver(
            audit,
            search_url=settings.LOOKUP_URL,
            timeout_seconds=settings.LOOKUP_TIMEOUT_SECONDS,
        ),
        notifier=DiscordWebhookNotifier(config.webhook_url, audit),
        audit=audit,
    )
    dispatcher = SequentialDispatcher(relay.handle)
    dispatcher.start()

    # The handler only enqueues; filtering and processing happen in order on
    # the dispatcher's single worker.
    @client.on(events.NewMessage())
    async def handler(event) -> None:
        dispatcher.submit(to_inbound(event.message))

    try:
        await client.run_until_disconnected()
    finally:
        await dispatcher.stop()


async def _serve(config: RelayConfig, audit: AuditLog, credentials: CredentialProvider) -> None:
    logger = logging.getLogger(__name__)

    logger.info("Starting userbot...")
    audit.record("Userbot started")

    client = build_client(config)
    await client.connect()
    try:
        await authorize(client, credentials)

        logger.info("Userbot connected successfully!")
        audit.record("Userbot connected successfully")

        save_session_if_changed(client, config.session, settings.ENV_PATH, audit)
        await _listen(client, config, audit)
    finally:
        await client.disconnect()


def _run() -> int:
    _print_banner()
    config = _load_config()
    _configure_logging()
    logger = logging.getLogger(__name__)

    audit = AuditLog(settings.AUDIT_LOG_PATH)
    try:
        credentials = build_credentials()
        asyncio.run(_serve(config, audit, credentials))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0
    except ChatResolutionError:
        return 1
    except Exception as exc:
        logger.exception("An unexpected error occurred")
        audit.record(f"FATAL ERROR: An unexpected error occurred: {exc}")
        return 1
    finally:
        audit.close()
    return 0


async def _login_session(config: RelayConfig, audit: AuditLog) -> None:
    client = build_client(config)
    await client.connect()
    try:
        await authorize(client, build_credentials())
        me = await client.get_me()
        logging.getLogger(__name__).info("Logged in as: %s", me.username or me.first_name)
        save_session_if_changed(client, config.session, settings.ENV_PATH, audit)
    finally:
        await client.disconnect()


def _login() -> int:
    _print_banner()
    config = _load_config(require_targets=False)
    _configure_logging()

    audit = AuditLog(settings.AUDIT_LOG_PATH)
    try:
        asyncio.run(_login_session(config, audit))
    except AuthorizationError as exc:
        logging.getLogger(__name__).error("Login failed: %s", exc)
        return 1
    finally:
        audit.close()
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="signalrelay")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the relay")
    subparsers.add_parser("login", help="Log in and save the session string to .env")

    args = parser.parse_args(argv)
    if args.command == "login":
        sys.exit(_login())
    sys.exit(_run())


if __name__ == "__main__":
    main()
