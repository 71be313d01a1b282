"""Telegram client factory for signalrelay.

The session lives in a StringSession so it can be persisted to the .env
file instead of a local .session database.
"""

from __future__ import annotations

import logging

from telethon import TelegramClient
from telethon.sessions import StringSession

import settings
from core.config import RelayConfig


def build_client(config: RelayConfig) -> TelegramClient:
    """Create a Telethon client from the loaded relay configuration.

    Must be called from inside the running event loop.
    """

    logging.getLogger(__name__).info("Initializing Telegram client")

    return TelegramClient(
        StringSession(config.session or None),
        config.api_id,
        config.api_hash,
        connection_retries=settings.CONNECTION_RETRIES,
    )
