"""Key=value credential store backed by the project's .env file."""

from __future__ import annotations

import logging

from dotenv import set_key

LOGGER = logging.getLogger(__name__)


def update_env_key(env_path: str, key: str, value: str) -> bool:
    """Replace ``KEY=...`` in place, or append it when absent.

    Not safe for concurrent writers. Returns False when the file could not
    be written; the caller keeps running with the in-memory value.
    """

    try:
        set_key(env_path, key, value, quote_mode="never")
    except OSError:
        LOGGER.exception("Error updating %s", env_path)
        print(f"\nPlease manually add this line to your .env file:\n{key}={value}\n")
        return False
    LOGGER.info("Successfully updated %s in %s", key, env_path)
    return True
