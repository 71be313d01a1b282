"""DexScreener pair lookup adapter.

Implements the core PairResolverPort with one GET against the public search
endpoint. Every failure is converted into an absent result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

import aiohttp

from core.ports import AuditLogPort

LOGGER = logging.getLogger(__name__)

SEARCH_URL = "https://api.dexscreener.com/latest/dex/search"
DEFAULT_TIMEOUT_SECONDS = 10.0


class PairLookupError(RuntimeError):
    """The search endpoint answered with a non-2xx status."""


class DexScreenerPairResolver:
    """Resolve a contract address to the first listed pair address."""

    def __init__(
        self,
        audit: AuditLogPort,
        search_url: str = SEARCH_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session_factory: Callable[[], Any] = aiohttp.ClientSession,
    ) -> None:
        self._audit = audit
        self._search_url = search_url
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session_factory = session_factory

    async def _fetch(self, contract_address: str) -> Any:
        async with self._session_factory() as session:
            async with session.get(
                self._search_url,
                params={"q": contract_address},
                timeout=self._timeout,
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise PairLookupError(f"HTTP {resp.status}")
                return await resp.json(content_type=None)

    async def resolve_pair(self, contract_address: str) -> Optional[str]:
        """Return the first pair address, or None. One attempt, no retries."""

        try:
            payload = await self._fetch(contract_address)
        except (aiohttp.ClientError, asyncio.TimeoutError, PairLookupError, ValueError) as exc:
            reason = str(exc) or type(exc).__name__
            LOGGER.error("Error fetching pair address from DexScreener: %s", reason)
            self._audit.record(f"API Error fetching pair address: {reason}")
            return None

        pairs = payload.get("pairs") if isinstance(payload, dict) else None
        pair_address = None
        if isinstance(pairs, list) and pairs and isinstance(pairs[0], dict):
            pair_address = pairs[0].get("pairAddress")

        if not pair_address:
            LOGGER.info("No pairs found for token %s", contract_address)
            self._audit.record(f"No pairs found for token: {contract_address}")
            return None

        self._audit.record(f"Found pair address for {contract_address}: {pair_address}")
        return pair_address
