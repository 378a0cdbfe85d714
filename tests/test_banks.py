from __future__ import annotations

from smsledger.core.banks import SAUDI_BANKS, build_bank_profiles, get_bank
from smsledger.core.filters import is_trusted_sender


def test_catalogue_ids_are_unique() -> None:
    ids = [bank.id for bank in SAUDI_BANKS]
    assert len(ids) == len(set(ids))


def test_get_bank_falls_back_to_cash() -> None:
    assert get_bank("alrajhi").name == "Al Rajhi Bank"
    assert get_bank("missing").id == "cash"


def test_cash_never_matches_any_sender() -> None:
    cash = get_bank("cash")
    assert cash.sms_sender_ids == ()
    assert not is_trusted_sender("Cash", [cash])


def test_display_name_by_language() -> None:
    bank = get_bank("riyad")
    assert bank.display_name("en") == "Riyad Bank"
    assert bank.display_name("ar") == "بنك الرياض"


def test_catalogue_entry_with_extra_sender_ids() -> None:
    profiles = build_bank_profiles([{"id": "alrajhi", "sms_sender_ids": ["RajhiAlerts", "AlRajhi"]}])
    assert len(profiles) == 1
    assert profiles[0].sms_sender_ids == ("AlRajhiBank", "AlRajhi", "RajhiAlerts")
    assert profiles[0].kind == "bank"


def test_custom_bank_entry() -> None:
    profiles = build_bank_profiles(
        [{"id": "tweeq", "name": "Tweeq", "kind": "wallet", "sms_sender_ids": "Tweeq"}]
    )
    assert profiles[0].id == "tweeq"
    assert profiles[0].kind == "wallet"
    assert profiles[0].sms_sender_ids == ("Tweeq",)
    assert is_trusted_sender("TWEEQ", profiles)


def test_disabled_and_incomplete_entries_are_skipped() -> None:
    profiles = build_bank_profiles(
        [
            {"id": "snb", "enabled": False},
            {"id": "not-a-bank"},
            {"id": "riyad"},
        ]
    )
    assert [p.id for p in profiles] == ["riyad"]
