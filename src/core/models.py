"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TokenInfo:
    """A fully parsed token announcement. Every field is required."""

    token_name: str
    contract_address: str
    price: str
    market_cap: str
    holders: str
    top10_concentration: str


@dataclass(frozen=True)
class InboundMessage:
    """Minimal message view used by the relay pipeline."""

    text: str
    is_outgoing: bool
    chat_id: Optional[int]
