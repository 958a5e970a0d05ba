"""
JSON log lines for holiday lookups.

Each line carries timestamp, level, module and message, plus whichever
holiday fields the call site passed through `extra` (event, city, year,
source, reason, count). Log pipelines filter on "event" to follow cache
hits, coalesced lookups and source failures.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

HOLIDAY_FIELDS = ("event", "city", "year", "source", "reason", "count")

# Per-request HTTP chatter from the outbound clients
QUIET_LOGGERS = ("httpcore", "httpx")


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per record; non-ASCII holiday names are kept as-is."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _utc_timestamp(),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (field, getattr(record, field))
            for field in HOLIDAY_FIELDS
            if getattr(record, field, None) is not None
        )
        return json.dumps(entry, default=str, ensure_ascii=False)


def configure_structured_logging(log_level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Route the root logger through a single JSON handler at log_level."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredJsonFormatter())
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
