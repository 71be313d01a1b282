"""Discord webhook notification adapter.

Posts one embed per signal. Delivery failures are logged and swallowed so a
bad send never stops the listener.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import aiohttp

from adapters.embed_formatting import build_embed
from core.models import TokenInfo
from core.ports import AuditLogPort

LOGGER = logging.getLogger(__name__)


class WebhookDeliveryError(RuntimeError):
    """The webhook answered with a non-2xx status."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DiscordWebhookNotifier:
    """Notifier adapter that sends embeds to a Discord webhook."""

    def __init__(
        self,
        webhook_url: str,
        audit: AuditLogPort,
        session_factory: Callable[[], Any] = aiohttp.ClientSession,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._webhook_url = webhook_url
        self._audit = audit
        self._session_factory = session_factory
        self._clock = clock

    async def _post(self, payload: dict) -> None:
        # No explicit timeout; aiohttp's default applies.
        async with self._session_factory() as session:
            async with session.post(self._webhook_url, json=payload) as resp:
                if not 200 <= resp.status < 300:
                    body = await resp.text()
                    raise WebhookDeliveryError(f"Discord webhook error {resp.status}: {body}")

    async def notify(self, info: Optional[TokenInfo], pair_address: Optional[str]) -> None:
        """Send the signal card. No-op when either argument is missing."""

        if info is None or not pair_address:
            return

        embed = build_embed(info, pair_address, self._clock())
        try:
            await self._post({"embeds": [embed]})
        except (aiohttp.ClientError, asyncio.TimeoutError, WebhookDeliveryError) as exc:
            reason = str(exc) or type(exc).__name__
            LOGGER.error("Error sending embed to Discord: %s", reason)
            self._audit.record(f"DISCORD ERROR: Error sending embed to Discord: {reason}")
            return

        LOGGER.info("Forwarded %s to Discord", info.token_name)
        self._audit.record("Successfully forwarded embed to Discord.")
