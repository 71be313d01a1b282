"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RelayConfig:
    """Credentials and endpoints required to run the relay."""

    api_id: int
    api_hash: str
    session: str
    target_chat: str
    webhook_url: str
