"""Static configuration for signalrelay.

Secrets and deployment values (Telegram credentials, target chat, webhook)
come from the environment, loaded from .env with python-dotenv. Everything
else lives in an optional config.json so it can be tweaked without code
changes; a missing file means defaults.
"""

import json
import os
from typing import Mapping, Optional

from dotenv import load_dotenv

from core.config import RelayConfig
from core.errors import ConfigError

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# The session string is written back here after a fresh login.
ENV_PATH = os.path.join(PROJECT_ROOT, ".env")

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        return {}

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Append-only audit trail of received and forwarded messages.
AUDIT_LOG_PATH = resolve_path(_CONFIG.get("audit_log", {}).get("path", "messages.log"))

# Market-data lookup used to find the pair address for a contract.
_lookup = _CONFIG.get("lookup", {})
LOOKUP_URL = _lookup.get("url", "https://api.dexscreener.com/latest/dex/search")
LOOKUP_TIMEOUT_SECONDS = float(_lookup.get("timeout_seconds", 10))

_telegram = _CONFIG.get("telegram", {})
CONNECTION_RETRIES = int(_telegram.get("connection_retries", 5))

# Logging configuration. Secrets named under redact.patterns are masked.
LOGGING = _CONFIG.get(
    "logging",
    {
        "enabled": True,
        "level": "INFO",
        "console": True,
        "redact": {"enabled": True, "patterns": ["API_HASH", "SESSION", "DISCORD_WEBHOOK_URL"]},
    },
)

REQUIRED_MESSAGE = (
    "API_ID, API_HASH, TARGET_CHAT_USERNAME, and DISCORD_WEBHOOK_URL must be set in the .env file."
)


def load_relay_config(
    env: Optional[Mapping[str, str]] = None,
    require_targets: bool = True,
) -> RelayConfig:
    """Build RelayConfig from the environment, reporting every problem at once.

    ``require_targets=False`` is used by the login command, which only needs
    the Telegram application credentials.
    """

    if env is None:
        load_dotenv(ENV_PATH)
        env = os.environ

    problems: list[str] = []

    api_id = 0
    raw_api_id = (env.get("API_ID") or "").strip()
    if not raw_api_id:
        problems.append("API_ID is required")
    else:
        try:
            api_id = int(raw_api_id)
        except ValueError:
            problems.append("API_ID must be a number")
        else:
            if not api_id:
                problems.append("API_ID must be non-zero")

    api_hash = (env.get("API_HASH") or "").strip()
    if not api_hash:
        problems.append("API_HASH is required")

    target_chat = (env.get("TARGET_CHAT_USERNAME") or "").strip()
    webhook_url = (env.get("DISCORD_WEBHOOK_URL") or "").strip()
    if require_targets:
        if not target_chat:
            problems.append("TARGET_CHAT_USERNAME is required")
        if not webhook_url:
            problems.append("DISCORD_WEBHOOK_URL is required")

    if problems:
        raise ConfigError(problems)

    return RelayConfig(
        api_id=api_id,
        api_hash=api_hash,
        session=(env.get("SESSION") or "").strip(),
        target_chat=target_chat,
        webhook_url=webhook_url,
    )
