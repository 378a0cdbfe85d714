from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

from smsledger.core.config import ScanConfig
from smsledger.core.models import BankProfile, Capability, RawMessage, ScanStatus
from smsledger.core.scanner import SmsScanner

BANKS = [
    BankProfile(id="alrajhi", name="Al Rajhi Bank", sms_sender_ids=("AlRajhi",)),
    BankProfile(id="snb", name="SNB", sms_sender_ids=("SNB",)),
]


class FakeInbox:
    def __init__(
        self,
        messages: list[RawMessage],
        capability: Capability = Capability.AVAILABLE,
        grant: bool = True,
    ) -> None:
        self.messages = messages
        self._capability = capability
        self._grant = grant
        self.fetch_counts: list[int] = []
        self.permission_requests = 0

    async def capability(self) -> Capability:
        return self._capability

    async def request_permission(self) -> bool:
        self.permission_requests += 1
        return self._grant

    async def list_inbox_messages(self, max_count: int) -> list[RawMessage]:
        self.fetch_counts.append(max_count)
        return list(self.messages)


class FailingInbox(FakeInbox):
    async def list_inbox_messages(self, max_count: int) -> list[RawMessage]:
        raise RuntimeError("native module crashed")


class SlowInbox(FakeInbox):
    async def list_inbox_messages(self, max_count: int) -> list[RawMessage]:
        await asyncio.sleep(1)
        return []


class CountingInbox(FakeInbox):
    def __init__(self, messages: list[RawMessage]) -> None:
        super().__init__(messages)
        self.active = 0
        self.max_active = 0

    async def list_inbox_messages(self, max_count: int) -> list[RawMessage]:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        return list(self.messages)


def _message(message_id: str, sender: str, body) -> RawMessage:
    return RawMessage(
        id=message_id,
        sender=sender,
        body=body,
        timestamp=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
    )


INBOX = [
    _message("1", "AlRajhiBank", "Purchase of SAR 45.50 at Starbucks with card ending 7788"),
    _message("2", "AlRajhiBank", "Your OTP is 4521"),
    _message("3", "Promo-Shop", "Purchase of SAR 99 at Mega Sale"),
    _message("4", "SNB", "تمت عملية شراء بقيمة 120.00 ريال من مطعم البيك"),
    _message("5", "SNB", "Transfer reminder: keep your card safe"),
]


def _scanner(inbox: FakeInbox, **overrides) -> SmsScanner:
    return SmsScanner(inbox, ScanConfig(**overrides))


def test_scan_gates_and_parses_trusted_transactions() -> None:
    inbox = FakeInbox(INBOX)
    result = asyncio.run(_scanner(inbox).scan(BANKS))

    assert result.status is ScanStatus.OK
    assert [c.id for c in result.candidates] == ["sms-1", "sms-4"]

    first = result.candidates[0]
    assert first.amount == Decimal("45.50")
    assert first.merchant == "Starbucks"
    assert first.card_last4 == "7788"
    assert first.category == "dining"
    assert first.bank_name == "AlRajhiBank"
    assert first.date == "2024-03-01T09:30:00+00:00"
    assert first.source == "SMS"


def test_fetch_is_bounded_by_max_messages() -> None:
    inbox = FakeInbox(INBOX)
    asyncio.run(_scanner(inbox).scan(BANKS))
    assert inbox.fetch_counts == [500]

    inbox = FakeInbox(INBOX)
    result = asyncio.run(_scanner(inbox, max_messages=1).scan(BANKS))
    assert inbox.fetch_counts == [1]
    assert [c.id for c in result.candidates] == ["sms-1"]


def test_no_banks_skips_the_fetch() -> None:
    inbox = FakeInbox(INBOX)
    result = asyncio.run(_scanner(inbox).scan([]))

    assert result.status is ScanStatus.NO_BANKS
    assert result.candidates == []
    assert inbox.fetch_counts == []


def test_banks_without_sender_ids_skip_the_fetch() -> None:
    inbox = FakeInbox(INBOX)
    cash = BankProfile(id="cash", name="Cash", kind="cash")
    result = asyncio.run(_scanner(inbox).scan([cash]))

    assert result.status is ScanStatus.NO_BANKS
    assert inbox.fetch_counts == []


def test_unavailable_capability_is_reported() -> None:
    inbox = FakeInbox(INBOX, capability=Capability.UNAVAILABLE)
    result = asyncio.run(_scanner(inbox).scan(BANKS))

    assert result.status is ScanStatus.UNAVAILABLE
    assert result.candidates == []
    assert inbox.permission_requests == 0
    assert inbox.fetch_counts == []


def test_pending_permission_is_requested_once() -> None:
    inbox = FakeInbox(INBOX, capability=Capability.PERMISSION_PENDING, grant=True)
    result = asyncio.run(_scanner(inbox).scan(BANKS))

    assert result.status is ScanStatus.OK
    assert inbox.permission_requests == 1
    assert len(result.candidates) == 2


def test_declined_permission_returns_denied() -> None:
    inbox = FakeInbox(INBOX, capability=Capability.PERMISSION_PENDING, grant=False)
    result = asyncio.run(_scanner(inbox).scan(BANKS))

    assert result.status is ScanStatus.DENIED
    assert result.candidates == []
    assert inbox.fetch_counts == []


def test_denied_capability_does_not_prompt_again() -> None:
    inbox = FakeInbox(INBOX, capability=Capability.DENIED)
    result = asyncio.run(_scanner(inbox).scan(BANKS))

    assert result.status is ScanStatus.DENIED
    assert inbox.permission_requests == 0


def test_fetch_error_fails_the_scan() -> None:
    result = asyncio.run(_scanner(FailingInbox([])).scan(BANKS))

    assert result.status is ScanStatus.FAILED
    assert result.candidates == []
    assert result.error == "native module crashed"


def test_fetch_timeout_fails_the_scan() -> None:
    result = asyncio.run(_scanner(SlowInbox([]), fetch_timeout_seconds=0.01).scan(BANKS))

    assert result.status is ScanStatus.FAILED
    assert result.error == "inbox fetch timed out"


def test_bad_message_discards_the_whole_batch_by_default() -> None:
    # A non-text body stands in for malformed native data.
    messages = INBOX + [_message("6", "SNB", 12345)]
    result = asyncio.run(_scanner(FakeInbox(messages)).scan(BANKS))

    assert result.status is ScanStatus.FAILED
    assert result.candidates == []


def test_bad_message_is_skipped_with_partial_results() -> None:
    messages = [_message("0", "SNB", 12345)] + INBOX
    result = asyncio.run(_scanner(FakeInbox(messages), partial_results=True).scan(BANKS))

    assert result.status is ScanStatus.OK
    assert [c.id for c in result.candidates] == ["sms-1", "sms-4"]


def test_duplicate_delivery_keeps_the_same_id() -> None:
    body = "Purchase of SAR 45.50 at Starbucks with card ending 7788"
    messages = [_message("9", "AlRajhiBank", body), _message("9", "AlRajhiBank", body)]
    result = asyncio.run(_scanner(FakeInbox(messages)).scan(BANKS))

    assert [c.id for c in result.candidates] == ["sms-9", "sms-9"]


def test_concurrent_scans_are_serialized() -> None:
    inbox = CountingInbox(INBOX)
    scanner = _scanner(inbox)

    async def _run_both():
        return await asyncio.gather(scanner.scan(BANKS), scanner.scan(BANKS))

    first, second = asyncio.run(_run_both())

    assert inbox.max_active == 1
    assert first.candidates == second.candidates
