"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Union

from telethon import utils
from telethon.tl.custom import Message

from core.models import InboundMessage


def _parse_target(target: str) -> Union[int, str]:
    value = target.strip()
    if value.lstrip("-").isdigit():
        return int(value)
    return value


def format_target_label(target: str) -> str:
    """Return the ``@name`` form used in audit lines."""

    value = target.strip()
    if value.startswith("@") or value.lstrip("-").isdigit():
        return value
    return f"@{value}"


async def resolve_chat_id(client, target: str) -> int:
    """Resolve a username or numeric id to the marked peer id.

    Marked ids (e.g. -100<channel_id>) are what ``Message.chat_id`` carries,
    so the result can be compared directly against incoming messages.
    """

    entity = await client.get_entity(_parse_target(target))
    return utils.get_peer_id(entity)


def to_inbound(message: Message) -> InboundMessage:
    """Build a core InboundMessage from a Telethon Message."""

    # Message.text is rendered through the client's markdown parse mode, so
    # bold and inline-code entities come through as ** and backticks.
    return InboundMessage(
        text=message.text or "",
        is_outgoing=bool(getattr(message, "out", False)),
        chat_id=message.chat_id,
    )
