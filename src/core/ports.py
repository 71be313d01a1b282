"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for lookup, notification, and audit
adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import TokenInfo


class PairResolverPort(Protocol):
    """Market-data lookup required by the core pipeline."""

    async def resolve_pair(self, contract_address: str) -> Optional[str]:
        ...


class NotifierPort(Protocol):
    """Notification operations required by the core pipeline."""

    async def notify(self, info: Optional[TokenInfo], pair_address: Optional[str]) -> None:
        ...


class AuditLogPort(Protocol):
    """Append-only audit trail."""

    def record(self, message: str) -> None:
        ...
