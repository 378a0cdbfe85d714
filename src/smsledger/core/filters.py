"""Sender whitelist and keyword gate (core domain).

The whitelist is the privacy gate: it is rebuilt from the bank profiles
passed to every call, and an empty whitelist trusts nobody.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, Optional

from smsledger.core.models import BankProfile
from smsledger.core.patterns import TRANSACTION_KEYWORDS


def build_whitelist(bank_profiles: Iterable[BankProfile]) -> frozenset[str]:
    """Return the case-folded set of all configured SMS sender ids."""

    entries: set[str] = set()
    for profile in bank_profiles:
        for sender_id in profile.sms_sender_ids:
            normalized = sender_id.strip().casefold()
            if normalized:
                entries.add(normalized)
    return frozenset(entries)


def is_whitelisted(sender: Optional[str], whitelist: AbstractSet[str]) -> bool:
    """Symmetric substring match of the sender against the whitelist.

    ``AlRajhiBank-SMS`` matches entry ``alrajhi`` and ``SNB`` matches entry
    ``snb-alerts``.
    """

    if not whitelist:
        return False
    normalized = (sender or "").strip().casefold()
    if not normalized:
        return False
    return any(entry in normalized or normalized in entry for entry in whitelist)


def is_trusted_sender(sender: Optional[str], bank_profiles: Iterable[BankProfile]) -> bool:
    """Return True when the sender belongs to a configured bank or wallet."""

    return is_whitelisted(sender, build_whitelist(bank_profiles))


def has_transaction_keyword(body: Optional[str]) -> bool:
    """Cheap lexical pre-filter run before full parsing."""

    lowered = (body or "").lower()
    return any(keyword in lowered for keyword in TRANSACTION_KEYWORDS)
