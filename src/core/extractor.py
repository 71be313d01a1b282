"""Declarative token announcement extraction (core domain).

An announcement is described as an ordered schema of named fields, each with
one capturing pattern. Extraction is all-or-nothing: the first field that
does not match aborts the parse and is reported as the reason.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Optional, Sequence

from core.models import TokenInfo


@dataclass(frozen=True)
class FieldRule:
    """One named field of the announcement schema."""

    name: str
    pattern: re.Pattern


@dataclass(frozen=True)
class ExtractionResult:
    """Either a complete TokenInfo or the name of the first missing field."""

    info: Optional[TokenInfo]
    missing_field: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.info is not None


# Patterns operate on the markdown-rendered message, so bold labels show up
# as **Label:** and inline code as backticks.
TOKEN_FIELDS: tuple[FieldRule, ...] = (
    FieldRule("token_name", re.compile(r"\$([a-zA-Z0-9]+)")),
    FieldRule("contract_address", re.compile(r"`([a-zA-Z0-9]{32,44})`")),
    FieldRule("price", re.compile(r"\*\*Price:\*\* ([$0-9.,]+)")),
    FieldRule("market_cap", re.compile(r"\*\*Market Cap:\*\* ([$0-9.,kM]+)")),
    FieldRule("holders", re.compile(r"\*\*Holders:\*\* ([0-9]+)")),
    FieldRule("top10_concentration", re.compile(r"\*\*Top10:\*\* ([0-9.]+%)")),
)


def parse_token_info(text: str, fields: Sequence[FieldRule] = TOKEN_FIELDS) -> ExtractionResult:
    """Evaluate the schema against ``text``.

    Fields are matched independently against the whole text and the first
    failure short-circuits; no partial record is ever produced.
    """

    values: dict[str, str] = {}
    for rule in fields:
        match = rule.pattern.search(text or "")
        if not match or not match.group(1):
            return ExtractionResult(info=None, missing_field=rule.name)
        values[rule.name] = match.group(1)
    return ExtractionResult(info=TokenInfo(**values))


def extract(text: str) -> Optional[TokenInfo]:
    """Return the parsed TokenInfo, or None if any field is missing."""

    return parse_token_info(text).info
