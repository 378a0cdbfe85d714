"""Inbox adapter factory for smsledger."""

from __future__ import annotations

import logging
from typing import Optional

from smsledger.adapters.json_inbox import JsonExportInbox
from smsledger.adapters.termux_inbox import TermuxSmsInbox
from smsledger.core.ports import SmsInboxPort


def build_inbox(
    provider: str,
    path: Optional[str] = None,
    skip_malformed: bool = False,
    timeout_seconds: Optional[float] = None,
) -> SmsInboxPort:
    """Create the configured inbox adapter.

    ``termux`` reads the phone inbox through Termux:API; ``json`` reads an
    exported inbox file.
    """

    logging.getLogger(__name__).info("Using %s inbox", provider)
    if provider == "termux":
        if timeout_seconds is None:
            return TermuxSmsInbox(skip_malformed=skip_malformed)
        return TermuxSmsInbox(skip_malformed=skip_malformed, permission_timeout_seconds=timeout_seconds)
    if provider == "json":
        return JsonExportInbox(path, skip_malformed=skip_malformed)
    raise ValueError(f"Unsupported inbox provider: {provider}")
