"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any device or storage-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

UNCATEGORIZED = "Uncategorized"
UNKNOWN_MERCHANT = "Unknown"
SMS_SOURCE = "SMS"


@dataclass(frozen=True)
class RawMessage:
    """One inbox message as read from the device."""

    id: str
    sender: str
    body: str
    timestamp: datetime


@dataclass(frozen=True)
class BankProfile:
    """User-configured bank or wallet with the SMS sender ids it uses."""

    id: str
    name: str
    name_ar: str = ""
    color: str = "#9CA3AF"
    kind: str = "bank"
    sms_sender_ids: tuple[str, ...] = ()

    def display_name(self, language: str = "en") -> str:
        if language == "ar" and self.name_ar:
            return self.name_ar
        return self.name


@dataclass(frozen=True)
class TransactionCandidate:
    """A parsed but not yet persisted transaction."""

    id: str
    amount: Decimal
    merchant: str
    category: str
    bank_name: str
    date: str
    source_text: str
    card_last4: Optional[str] = None
    source: str = SMS_SOURCE


class Capability(str, Enum):
    """State of the on-device message reading capability."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    PERMISSION_PENDING = "permission_pending"
    DENIED = "denied"


class ScanStatus(str, Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"
    DENIED = "denied"
    NO_BANKS = "no_banks"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one scan invocation."""

    status: ScanStatus
    candidates: list[TransactionCandidate] = field(default_factory=list)
    error: Optional[str] = None
