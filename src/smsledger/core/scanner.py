"""Core SMS scan orchestration.

This module is device-agnostic. It only relies on the inbox port, enabling
different inbox backends without changes here. The scan enforces a strict
order:
1) Capability check (unavailable is reported, never raised)
2) Permission check, requesting it once when pending
3) Whitelist precondition (no configured sender ids means no fetch)
4) Bounded fetch with a timeout
5) Keyword gate AND sender whitelist before parsing each message
6) Candidate assembly keyed by the source message id
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

from smsledger.core.config import ScanConfig
from smsledger.core.filters import build_whitelist, has_transaction_keyword, is_whitelisted
from smsledger.core.models import (
    BankProfile,
    Capability,
    RawMessage,
    ScanResult,
    ScanStatus,
    TransactionCandidate,
)
from smsledger.core.parser import parse
from smsledger.core.ports import SmsInboxPort

LOGGER = logging.getLogger(__name__)


class SmsScanner:
    """Turns the device inbox into a list of transaction candidates."""

    def __init__(self, inbox: SmsInboxPort, config: ScanConfig) -> None:
        self._inbox = inbox
        self._config = config
        # Background and manual scans on one instance run one at a time.
        self._lock = asyncio.Lock()

    async def scan(self, bank_profiles: Iterable[BankProfile]) -> ScanResult:
        """Run one scan against the given bank configuration snapshot."""

        async with self._lock:
            try:
                return await self._scan(list(bank_profiles))
            except Exception as exc:
                LOGGER.exception("SMS scan failed")
                return ScanResult(ScanStatus.FAILED, error=str(exc) or type(exc).__name__)

    async def _scan(self, bank_profiles: List[BankProfile]) -> ScanResult:
        capability = await self._inbox.capability()
        if capability is Capability.UNAVAILABLE:
            LOGGER.info("SMS reading is not available on this device")
            return ScanResult(ScanStatus.UNAVAILABLE)
        if capability is Capability.DENIED:
            LOGGER.info("SMS permission was denied")
            return ScanResult(ScanStatus.DENIED)
        if capability is Capability.PERMISSION_PENDING:
            if not await self._inbox.request_permission():
                LOGGER.info("SMS permission request was declined")
                return ScanResult(ScanStatus.DENIED)

        whitelist = build_whitelist(bank_profiles)
        if not whitelist:
            LOGGER.info("No bank sender ids configured; skipping inbox fetch")
            return ScanResult(ScanStatus.NO_BANKS)

        try:
            messages = await asyncio.wait_for(
                self._inbox.list_inbox_messages(self._config.max_messages),
                timeout=self._config.fetch_timeout_seconds,
            )
        except asyncio.TimeoutError:
            LOGGER.warning("Inbox fetch timed out after %ss", self._config.fetch_timeout_seconds)
            return ScanResult(ScanStatus.FAILED, error="inbox fetch timed out")

        candidates: List[TransactionCandidate] = []
        skipped = 0
        for message in messages[: self._config.max_messages]:
            try:
                candidate = self._process(message, whitelist)
            except Exception:
                if not self._config.partial_results:
                    raise
                LOGGER.exception("Skipping message %s after a parse failure", getattr(message, "id", "?"))
                continue
            if candidate is None:
                skipped += 1
                continue
            candidates.append(candidate)

        LOGGER.info(
            "SMS scan complete: messages=%s, candidates=%s, skipped=%s",
            len(messages),
            len(candidates),
            skipped,
        )
        return ScanResult(ScanStatus.OK, candidates)

    @staticmethod
    def _process(message: RawMessage, whitelist: frozenset[str]) -> Optional[TransactionCandidate]:
        # Gate first; only trusted, transaction-looking messages are parsed.
        if not has_transaction_keyword(message.body):
            return None
        if not is_whitelisted(message.sender, whitelist):
            return None
        return parse(
            message.body,
            message.sender,
            timestamp=message.timestamp,
            source_id=message.id,
        )
