"""Error types raised outside the per-message pipeline."""

from __future__ import annotations


class RelayError(RuntimeError):
    """Base class for relay setup failures."""


class ConfigError(RelayError):
    """Required configuration is missing or invalid."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems


class AuthorizationError(RelayError):
    """The session is not authorized and no credentials can be obtained."""


class ChatResolutionError(RelayError):
    """The target chat could not be resolved at startup."""
