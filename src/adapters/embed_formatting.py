"""Discord embed formatting for token signals.

Keeping formatting here keeps the card layout in one place and lets the
webhook adapter stay a thin transport.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from core.models import TokenInfo

EMBED_COLOR = 0x9046FF
EMBED_AUTHOR = "✨ TRADE SIGNAL ✨"
STATS_FIELD_NAME = "📊 Token Stats"
LINKS_FIELD_NAME = "🔗 Quick Links"
STATS_LABEL_WIDTH = 11
LINK_SEPARATOR = " • "

# (label, url template); templates may use {pair_address} and {contract_address}.
LINK_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("Axiom", "https://axiom.trade/meme/{pair_address}/@gravy"),
    ("DexScreener", "https://dexscreener.com/solana/{contract_address}"),
    ("Solscan", "https://solscan.io/token/{contract_address}"),
)


def _stat_line(label: str, value: str) -> str:
    return f"`{label.ljust(STATS_LABEL_WIDTH)}` {value}"


def format_stats(info: TokenInfo) -> str:
    """Render the aligned stats block."""

    return "\n".join(
        [
            _stat_line("Price", info.price),
            _stat_line("Market Cap", info.market_cap),
            _stat_line("Holders", info.holders),
            _stat_line("Top 10", info.top10_concentration),
        ]
    )


def format_links(info: TokenInfo, pair_address: str) -> str:
    """Render the quick links block as markdown hyperlinks."""

    links = []
    for label, template in LINK_TEMPLATES:
        url = template.format(pair_address=pair_address, contract_address=info.contract_address)
        links.append(f"[{label}]({url})")
    return LINK_SEPARATOR.join(links)


def build_embed(info: TokenInfo, pair_address: str, timestamp: datetime) -> dict[str, Any]:
    """Build the rich card for one signal. A fresh dict is returned per call."""

    return {
        "color": EMBED_COLOR,
        "author": {"name": EMBED_AUTHOR},
        "title": f"🪙 **${info.token_name}**",
        "description": f"```{info.contract_address}```",
        "fields": [
            {"name": STATS_FIELD_NAME, "value": format_stats(info), "inline": False},
            {"name": LINKS_FIELD_NAME, "value": format_links(info, pair_address), "inline": False},
        ],
        "timestamp": timestamp.isoformat(),
    }
