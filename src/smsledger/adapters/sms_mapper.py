"""Native SMS record to core message mapping adapter.

This keeps inbox record quirks (field names, timestamp formats, nulls) out of
the core pipeline.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from smsledger.core.models import RawMessage

_SENDER_KEYS = ("address", "number", "sender")
_TIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M")


def _first(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_timestamp(value: Any) -> datetime:
    """Parse epoch millis or a local "YYYY-MM-DD HH:MM[:SS]" string."""

    if isinstance(value, bool):
        raise ValueError(f"Unsupported SMS timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)
        for fmt in _TIME_FORMATS:
            try:
                # Device-local wall clock time.
                return datetime.strptime(text, fmt).astimezone()
            except ValueError:
                continue
    raise ValueError(f"Unsupported SMS timestamp: {value!r}")


def raw_message_from_record(record: Mapping[str, Any]) -> RawMessage:
    """Build a RawMessage from an Android or Termux inbox record."""

    message_id = _first(record, ("_id", "id"))
    timestamp_value = _first(record, ("date", "received"))
    if timestamp_value is None:
        raise ValueError("SMS record has no timestamp")
    timestamp = parse_timestamp(timestamp_value)

    if message_id is None:
        # Older termux-sms-list builds omit _id.
        thread_id = record.get("threadid", "0")
        message_id = f"{thread_id}-{int(timestamp.timestamp())}"

    return RawMessage(
        id=str(message_id),
        sender=str(_first(record, _SENDER_KEYS) or ""),
        body=str(record.get("body") or ""),
        timestamp=timestamp,
    )
