"""Field extractors for bank SMS bodies (core domain).

Every extractor degrades to "no match" instead of raising, so malformed or
unrelated messages simply produce no candidate.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
import re
from typing import Optional

from smsledger.core.models import UNKNOWN_MERCHANT
from smsledger.core.patterns import (
    AMOUNT_PATTERN,
    CARD_PATTERN,
    MERCHANT_PATTERN,
    MERCHANT_STOP_WORDS,
)

_NUMERIC_SENDER = re.compile(r"^\+?\d+$")


def _ascii_digits(value: str) -> str:
    # Arabic-Indic digits satisfy \d; store them as ASCII.
    return "".join(str(int(ch)) if ch.isdecimal() else ch for ch in value)


def extract_amount(body: Optional[str]) -> Optional[Decimal]:
    """Return the first positive amount adjacent to a currency token."""

    if not body:
        return None
    match = AMOUNT_PATTERN.search(body)
    if not match:
        return None
    raw = match.group(1) or match.group(2)
    try:
        amount = Decimal(_ascii_digits(raw.replace(",", "")))
    except InvalidOperation:
        return None
    if amount <= 0:
        return None
    return amount


def extract_card_last4(body: Optional[str]) -> Optional[str]:
    """Return exactly four digits following a card anchor phrase, if any."""

    if not body:
        return None
    match = CARD_PATTERN.search(body)
    if not match:
        return None
    return _ascii_digits(match.group(1))


def _strip_stop_words(merchant: str) -> str:
    words = merchant.split()
    while words and words[-1].lower() in MERCHANT_STOP_WORDS:
        words.pop()
    return " ".join(words)


def extract_merchant(body: Optional[str], sender: Optional[str] = None) -> str:
    """Return the payee name, falling back to the sender, then "Unknown".

    Anchors are tried left to right; a capture that is only stop words
    ("from card ending ...", "من حسابك") moves on to the next anchor.
    """

    for match in MERCHANT_PATTERN.finditer(body or ""):
        merchant = _strip_stop_words(match.group(1).strip())
        if merchant:
            return merchant

    sender = (sender or "").strip()
    if sender and not _NUMERIC_SENDER.match(sender):
        return sender
    return UNKNOWN_MERCHANT
