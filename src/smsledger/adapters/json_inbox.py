"""Exported-inbox adapter.

Reads a JSON array of Android inbox records (``_id``, ``address``, ``body``,
``date`` in epoch millis), the shape produced by Android SMS export tools.
Useful off-device and in tests.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

from smsledger.adapters.sms_mapper import raw_message_from_record
from smsledger.core.models import Capability, RawMessage

LOGGER = logging.getLogger(__name__)


class JsonExportInbox:
    """Inbox adapter backed by an exported JSON file."""

    def __init__(self, path: Optional[str], skip_malformed: bool = False) -> None:
        self._path = path
        self._skip_malformed = skip_malformed

    async def capability(self) -> Capability:
        if not self._path or not os.path.isfile(self._path):
            return Capability.UNAVAILABLE
        if not os.access(self._path, os.R_OK):
            return Capability.DENIED
        return Capability.AVAILABLE

    async def request_permission(self) -> bool:
        # File permissions cannot be granted from here.
        return await self.capability() is Capability.AVAILABLE

    async def list_inbox_messages(self, max_count: int) -> list[RawMessage]:
        with open(self._path, "r", encoding="utf-8") as handle:
            records = json.load(handle)
        if not isinstance(records, list):
            raise ValueError(f"Expected a JSON array of SMS records in {self._path}")

        messages: list[RawMessage] = []
        for record in records[:max_count]:
            if not isinstance(record, dict):
                if self._skip_malformed:
                    continue
                raise ValueError(f"SMS record must be an object, got {type(record).__name__}")
            try:
                messages.append(raw_message_from_record(record))
            except ValueError:
                if not self._skip_malformed:
                    raise
                LOGGER.warning("Skipping malformed SMS record %s", record.get("_id", "?"))
        return messages
