"""Append-only audit log adapter.

Implements the core AuditLogPort with a dedicated logger and file handler.
Each line is ``[<ISO-8601 UTC timestamp>] <message>``. Write errors are
reported on the console, never raised.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Optional

LOGGER = logging.getLogger(__name__)


class _IsoTimestampFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class AuditLog:
    """File-backed audit trail that satisfies the AuditLogPort contract."""

    def __init__(self, path: str) -> None:
        self._path = os.path.abspath(path)
        # Audit lines are kept out of the diagnostic log tree.
        self._logger = logging.getLogger(f"signalrelay.audit.{self._path}")
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False

        self._handler = logging.FileHandler(self._path, mode="a", encoding="utf-8", delay=True)
        self._handler.setFormatter(_IsoTimestampFormatter("[%(asctime)s] %(message)s"))
        self._logger.addHandler(self._handler)

    def record(self, message: str) -> None:
        try:
            self._logger.info(message)
        except OSError as exc:
            # A delayed FileHandler opens its stream outside its own error handling.
            LOGGER.error("Error writing to audit log %s: %s", self._path, exc)

    def close(self) -> None:
        self._logger.removeHandler(self._handler)
        self._handler.close()
