from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

from smsledger.adapters.sqlite_storage import SQLiteTransactionStore
from smsledger.core.config import ScanConfig
from smsledger.core.models import BankProfile, Capability, RawMessage
from smsledger.core.parser import parse
from smsledger.core.scanner import SmsScanner

BODY = "Purchase of SAR 1,250.75 at Jarir Bookstore with card ending 7788"


def _store(tmp_path) -> SQLiteTransactionStore:
    store = SQLiteTransactionStore(str(tmp_path / "ledger.db"))
    store.init_db()
    return store


def test_add_and_read_back_keeps_decimal_amount(tmp_path) -> None:
    store = _store(tmp_path)
    candidate = parse(BODY, "AlRajhiBank", source_id=7)

    assert store.add_transactions([candidate]) == 1
    assert store.has_transaction("sms-7")

    [stored] = store.list_transactions()
    assert stored == candidate
    assert stored.amount == Decimal("1250.75")


def test_same_id_is_stored_once(tmp_path) -> None:
    store = _store(tmp_path)
    first = parse(BODY, "AlRajhiBank", source_id=7)
    second = parse(BODY, "AlRajhiBank", source_id=7)

    assert store.add_transactions([first, second]) == 1
    assert store.add_transactions([first]) == 0
    assert store.known_ids() == {"sms-7"}


def test_duplicate_inbox_delivery_persists_one_record(tmp_path) -> None:
    class TwiceInbox:
        async def capability(self) -> Capability:
            return Capability.AVAILABLE

        async def request_permission(self) -> bool:
            return True

        async def list_inbox_messages(self, max_count: int) -> list[RawMessage]:
            message = RawMessage(
                id="77",
                sender="AlRajhiBank",
                body=BODY,
                timestamp=datetime(2024, 3, 1, tzinfo=timezone.utc),
            )
            return [message, message]

    banks = [BankProfile(id="alrajhi", name="Al Rajhi Bank", sms_sender_ids=("AlRajhi",))]
    result = asyncio.run(SmsScanner(TwiceInbox(), ScanConfig()).scan(banks))
    store = _store(tmp_path)

    assert len(result.candidates) == 2
    assert store.add_transactions(result.candidates) == 1
    assert len(store.list_transactions()) == 1


def test_list_transactions_newest_first_with_limit(tmp_path) -> None:
    store = _store(tmp_path)
    older = parse(BODY, "SNB", timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc), source_id=1)
    newer = parse(BODY, "SNB", timestamp=datetime(2024, 2, 1, tzinfo=timezone.utc), source_id=2)
    store.add_transactions([older, newer])

    assert [t.id for t in store.list_transactions()] == ["sms-2", "sms-1"]
    assert [t.id for t in store.list_transactions(limit=1)] == ["sms-2"]
