"""Ports (interfaces) used by the scan orchestrator.

Ports define the minimal contracts for the device inbox and the transaction
store so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from smsledger.core.models import Capability, RawMessage, TransactionCandidate


class SmsInboxPort(Protocol):
    """Platform and permission gated access to the SMS inbox."""

    async def capability(self) -> Capability:
        ...

    async def request_permission(self) -> bool:
        ...

    async def list_inbox_messages(self, max_count: int) -> list[RawMessage]:
        ...


class TransactionStorePort(Protocol):
    """Storage operations that consume scan output."""

    def known_ids(self) -> set[str]:
        ...

    def add_transactions(self, candidates: Iterable[TransactionCandidate]) -> int:
        ...
