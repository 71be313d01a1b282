"""Core relay pipeline.

This module is integration-agnostic. It only relies on ports for lookup,
notifications, and auditing, so Telegram and HTTP details stay in adapters.
"""

from __future__ import annotations

import logging

from core.extractor import parse_token_info
from core.models import InboundMessage
from core.ports import AuditLogPort, NotifierPort, PairResolverPort

LOGGER = logging.getLogger(__name__)


class SignalRelay:
    """Runs extract -> resolve -> notify for messages from one chat."""

    def __init__(
        self,
        target_chat_id: int,
        source_label: str,
        resolver: PairResolverPort,
        notifier: NotifierPort,
        audit: AuditLogPort,
    ) -> None:
        self._target_chat_id = target_chat_id
        self._source_label = source_label
        self._resolver = resolver
        self._notifier = notifier
        self._audit = audit

    def is_eligible(self, message: InboundMessage) -> bool:
        """Only incoming, non-empty messages from the target chat qualify."""

        if message.is_outgoing or not message.text:
            return False
        return message.chat_id is not None and message.chat_id == self._target_chat_id

    async def handle(self, message: InboundMessage) -> None:
        """Process one message through the pipeline.

        Any failed stage ends processing for this message only.
        """

        # Ignored messages leave no trace in the audit log.
        if not self.is_eligible(message):
            return

        LOGGER.info("^^^ MESSAGE MATCHED! ^^^")
        self._audit.record(f'MESSAGE RECEIVED: [From: {self._source_label}] Message: "{message.text}"')

        result = parse_token_info(message.text)
        if result.info is None:
            self._audit.record(
                f"Message did not match expected format (missing {result.missing_field}). "
                "Skipping Discord forward."
            )
            LOGGER.info("Message format not recognized (missing %s), will not be forwarded.", result.missing_field)
            return

        info = result.info
        self._audit.record(f"Extracted {info.token_name}. Fetching pair address...")
        LOGGER.info("Extracted %s. Fetching pair address...", info.token_name)

        pair_address = await self._resolver.resolve_pair(info.contract_address)
        if not pair_address:
            self._audit.record(
                f"Could not find pair address for {info.contract_address}. Skipping Discord forward."
            )
            LOGGER.info("Could not find pair address. Message will not be forwarded.")
            return

        LOGGER.info("Pair address found. Sending formatted embed to Discord...")
        await self._notifier.notify(info, pair_address)
