"""Built-in bank catalogue and bank config normalization."""

from __future__ import annotations

import logging
from typing import Iterable, List

from smsledger.core.models import BankProfile

LOGGER = logging.getLogger(__name__)

SAUDI_BANKS: List[BankProfile] = [
    BankProfile("alrajhi", "Al Rajhi Bank", "مصرف الراجحي", "#00A651", "bank", ("AlRajhiBank", "AlRajhi")),
    BankProfile("snb", "Saudi National Bank (SNB)", "البنك الأهلي السعودي", "#004B87", "bank", ("SNB", "NCB", "AlAhli")),
    BankProfile("riyad", "Riyad Bank", "بنك الرياض", "#0052A5", "bank", ("RiyadBank",)),
    BankProfile("sab", "Saudi Awwal Bank (SAB)", "البنك السعودي الأول", "#0066B3", "bank", ("SAB", "SABB")),
    BankProfile("anb", "Arab National Bank (ANB)", "البنك العربي الوطني", "#E31E24", "bank", ("ANB",)),
    BankProfile("saib", "The Saudi Investment Bank (SAIB)", "البنك السعودي للاستثمار", "#1B4D89", "bank", ("SAIB",)),
    BankProfile("alinma", "Alinma Bank", "مصرف الإنماء", "#00A859", "bank", ("Alinma", "AlinmaBank")),
    BankProfile("albilad", "Bank Albilad", "بنك البلاد", "#D4AF37", "bank", ("AlBilad", "AlBiladBank")),
    BankProfile("bsf", "Banque Saudi Fransi (BSF)", "البنك السعودي الفرنسي", "#C8102E", "bank", ("BSF",)),
    BankProfile("aljazira", "Bank AlJazira", "بنك الجزيرة", "#0072BC", "bank", ("AlJazira",)),
    BankProfile("gib", "Gulf International Bank Saudi Arabia (GIB)", "بنك الخليج الدولي", "#003B5C", "bank", ("GIB",)),
    BankProfile("emiratesnbd", "Emirates NBD Saudi Arabia", "بنك الإمارات دبي الوطني", "#00923F", "bank", ("EmiratesNBD",)),
    BankProfile("deutsche", "Deutsche Bank (Saudi Arabia Branch)", "دويتشه بنك", "#0018A8", "bank", ("Deutsche",)),
    BankProfile("jpmorgan", "J.P. Morgan Saudi Arabia", "جي بي مورغان", "#0066B3", "bank", ("JPMorgan",)),
    BankProfile("boc", "Bank of China (Riyadh Branch)", "بنك الصين", "#C8102E", "bank", ("BOC",)),
    BankProfile("stcpay", "STC Pay", "STC Pay", "#5F259F", "wallet", ("stcpay", "stc pay")),
    BankProfile("urpay", "urpay", "يور باي", "#FF6B00", "wallet", ("Urpay", "urpay")),
    # Manual entries only; an empty sender list never matches.
    BankProfile("cash", "Cash", "نقدي", "#10B981", "cash", ()),
]

_BY_ID = {bank.id: bank for bank in SAUDI_BANKS}


def get_bank(bank_id: str) -> BankProfile:
    """Return a catalogue bank, falling back to the cash profile.

    Public lookup for callers that hold a bank id from stored data or a UI
    selection. Config loading uses the catalogue directly because an
    unknown id there defines a custom bank instead.
    """

    return _BY_ID.get(bank_id, _BY_ID["cash"])


def _sender_ids(raw: object) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        raise ValueError(f"sms_sender_ids must be a list of strings, got {type(raw).__name__}")
    return tuple(str(item).strip() for item in raw if str(item).strip())


def build_bank_profiles(banks_config: Iterable[dict]) -> List[BankProfile]:
    """Normalize bank entries from config into BankProfile objects.

    ``{"id": "alrajhi"}`` selects a catalogue bank and may add extra
    ``sms_sender_ids``. Unknown ids with a ``name`` define a custom bank.
    Disabled entries and entries with neither are skipped.
    """

    profiles: List[BankProfile] = []
    for entry in banks_config:
        if not entry.get("enabled", True):
            continue
        bank_id = str(entry.get("id") or "").strip()
        extra_ids = _sender_ids(entry.get("sms_sender_ids"))

        known = _BY_ID.get(bank_id)
        if known is not None:
            merged = known.sms_sender_ids + tuple(i for i in extra_ids if i not in known.sms_sender_ids)
            profiles.append(
                BankProfile(
                    id=known.id,
                    name=entry.get("name") or known.name,
                    name_ar=entry.get("name_ar") or known.name_ar,
                    color=entry.get("color") or known.color,
                    kind=known.kind,
                    sms_sender_ids=merged,
                )
            )
            continue

        name = entry.get("name")
        if not name:
            LOGGER.warning("Skipping bank entry without a known id or a name: %s", bank_id or entry)
            continue
        profiles.append(
            BankProfile(
                id=bank_id or name.lower().replace(" ", "-"),
                name=name,
                name_ar=entry.get("name_ar", ""),
                color=entry.get("color", "#9CA3AF"),
                kind=entry.get("kind", "bank"),
                sms_sender_ids=extra_ids,
            )
        )
    return profiles
