"""Deduplication helpers (core domain)."""

from __future__ import annotations

import hashlib
import re
from typing import Iterable, List

from smsledger.core.models import TransactionCandidate

ID_PREFIX = "sms-"


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def normalize_for_fingerprint(text: str) -> str:
    """Normalize text for deterministic fingerprinting."""

    return _collapse_whitespace(text).lower()


def candidate_id(source_id: object) -> str:
    """Return the dedup key for a message with a source-assigned id."""

    return f"{ID_PREFIX}{source_id}"


def fingerprint_id(sender: str, body: str) -> str:
    """Return a content-derived dedup key for messages without a source id."""

    payload = f"{(sender or '').lower()}\n{normalize_for_fingerprint(body or '')}"
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{ID_PREFIX}{digest[:16]}"


def filter_new_candidates(
    candidates: Iterable[TransactionCandidate],
    known_ids: Iterable[str],
) -> List[TransactionCandidate]:
    """Drop candidates whose id is already known or repeated in the batch."""

    seen = set(known_ids)
    fresh: List[TransactionCandidate] = []
    for candidate in candidates:
        if candidate.id in seen:
            continue
        seen.add(candidate.id)
        fresh.append(candidate)
    return fresh
