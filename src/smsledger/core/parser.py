"""Message parser composing the field extractors and the classifier."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from smsledger.core.categorizer import classify
from smsledger.core.dedup import candidate_id, fingerprint_id
from smsledger.core.extractors import extract_amount, extract_card_last4, extract_merchant
from smsledger.core.models import TransactionCandidate


def _iso(timestamp: Optional[datetime]) -> str:
    if timestamp is None:
        # Non-scan call sites have no receipt time; stamp "now".
        timestamp = datetime.now(timezone.utc)
    elif timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).isoformat()


def parse(
    body: Optional[str],
    sender: Optional[str],
    timestamp: Optional[datetime] = None,
    source_id: Optional[object] = None,
) -> Optional[TransactionCandidate]:
    """Parse one (body, sender) pair into a candidate, or None.

    No amount means no candidate. Card, merchant, and category always
    degrade to their fallbacks. When ``source_id`` is missing the id is
    derived from the message content so it stays deterministic.
    """

    body = body or ""
    sender = sender or ""

    amount = extract_amount(body)
    if amount is None:
        return None

    card_last4 = extract_card_last4(body)
    merchant = extract_merchant(body, sender)
    category = classify(merchant, body)

    if source_id is None:
        transaction_id = fingerprint_id(sender, body)
    else:
        transaction_id = candidate_id(source_id)

    return TransactionCandidate(
        id=transaction_id,
        amount=amount,
        merchant=merchant,
        category=category,
        bank_name=sender,
        date=_iso(timestamp),
        source_text=body,
        card_last4=card_last4,
    )
