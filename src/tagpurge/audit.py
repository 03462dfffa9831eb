"""Append-only audit log of purge decisions."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from tagpurge.config import PurgeSettings

logger = logging.getLogger(__name__)

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@runtime_checkable
class AuditSink(Protocol):
    """Destination for audit records."""

    def write(self, record: dict[str, Any]) -> None:
        """Append one record. Must not raise."""
        ...


def audit_record(
    level: str,
    data: dict[str, Any],
    settings: PurgeSettings,
) -> dict[str, Any]:
    """Enrich caller data with level, host, site and timestamp."""
    return {
        **data,
        "level": level,
        "server": settings.server_name,
        "site": settings.site_scope,
        "created": datetime.now().strftime(_TIMESTAMP_FORMAT),
    }


class FileAuditSink:
    """Writes one JSON line per record to a file.

    A missing path or an unwritable file is reported through ``logging``
    and otherwise ignored.
    """

    def __init__(self, path: str | None) -> None:
        self._path = path or None

    @classmethod
    def from_settings(cls, settings: PurgeSettings) -> FileAuditSink:
        return cls(settings.log_path)

    def write(self, record: dict[str, Any]) -> None:
        """Append a record to the log file."""
        if self._path is None:
            logger.warning("Cloudflare log file path not configured (CF_LOG_PATH)")
            return

        line = json.dumps(record, default=str)
        try:
            with open(self._path, "a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as exc:
            logger.warning(
                "Cloudflare log file path not writable: %s (%s)", self._path, exc
            )


class MemoryAuditSink:
    """Keeps records in memory."""

    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []

    def write(self, record: dict[str, Any]) -> None:
        self.records.append(record)

    def clear(self) -> None:
        self.records.clear()
