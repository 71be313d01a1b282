from __future__ import annotations

import asyncio
from typing import Optional

from core.models import InboundMessage, TokenInfo
from core.relay import SignalRelay
from fakes import FakeAudit

TARGET_CHAT_ID = -1001234567890
CA = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJ"
SIGNAL = (
    f"New gem: $FOO `{CA}` "
    "**Price:** $0.002 **Market Cap:** $500k **Holders:** 120 **Top10:** 12.5%"
)


class FakeResolver:
    def __init__(self, pair_address: Optional[str]) -> None:
        self._pair_address = pair_address
        self.calls: list[str] = []

    async def resolve_pair(self, contract_address: str) -> Optional[str]:
        self.calls.append(contract_address)
        return self._pair_address


class FakeNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[TokenInfo, str]] = []

    async def notify(self, info: Optional[TokenInfo], pair_address: Optional[str]) -> None:
        self.sent.append((info, pair_address))


def _relay(resolver: FakeResolver, notifier: FakeNotifier, audit: FakeAudit) -> SignalRelay:
    return SignalRelay(
        target_chat_id=TARGET_CHAT_ID,
        source_label="@gemcalls",
        resolver=resolver,
        notifier=notifier,
        audit=audit,
    )


def _message(text: str = SIGNAL, chat_id: Optional[int] = TARGET_CHAT_ID, out: bool = False) -> InboundMessage:
    return InboundMessage(text=text, is_outgoing=out, chat_id=chat_id)


def test_valid_signal_is_forwarded_with_pair_address() -> None:
    resolver = FakeResolver("P1")
    notifier = FakeNotifier()
    audit = FakeAudit()

    asyncio.run(_relay(resolver, notifier, audit).handle(_message()))

    assert resolver.calls == [CA]
    assert len(notifier.sent) == 1
    info, pair_address = notifier.sent[0]
    assert info.token_name == "FOO"
    assert info.contract_address == CA
    assert pair_address == "P1"
    assert audit.lines[0] == f'MESSAGE RECEIVED: [From: @gemcalls] Message: "{SIGNAL}"'
    assert "Extracted FOO. Fetching pair address..." in audit.lines


def test_other_chat_is_ignored_without_audit() -> None:
    resolver = FakeResolver("P1")
    notifier = FakeNotifier()
    audit = FakeAudit()

    asyncio.run(_relay(resolver, notifier, audit).handle(_message(chat_id=-1009999)))

    assert resolver.calls == []
    assert notifier.sent == []
    assert audit.lines == []


def test_outgoing_and_empty_messages_are_ignored() -> None:
    resolver = FakeResolver("P1")
    notifier = FakeNotifier()
    audit = FakeAudit()
    relay = _relay(resolver, notifier, audit)

    asyncio.run(relay.handle(_message(out=True)))
    asyncio.run(relay.handle(_message(text="")))
    asyncio.run(relay.handle(_message(chat_id=None)))

    assert resolver.calls == []
    assert audit.lines == []


def test_no_pair_skips_notification() -> None:
    resolver = FakeResolver(None)
    notifier = FakeNotifier()
    audit = FakeAudit()

    asyncio.run(_relay(resolver, notifier, audit).handle(_message()))

    assert resolver.calls == [CA]
    assert notifier.sent == []
    assert audit.lines[-1] == f"Could not find pair address for {CA}. Skipping Discord forward."


def test_incomplete_signal_stops_before_lookup() -> None:
    resolver = FakeResolver("P1")
    notifier = FakeNotifier()
    audit = FakeAudit()

    text = SIGNAL.replace("**Holders:** 120 ", "")
    asyncio.run(_relay(resolver, notifier, audit).handle(_message(text=text)))

    assert resolver.calls == []
    assert notifier.sent == []
    assert audit.lines[-1] == (
        "Message did not match expected format (missing holders). Skipping Discord forward."
    )
