"""Shared console formatting helpers.

Keeping formatting here prevents drift between CLI commands and keeps
user-facing notices consistent regardless of which command produced them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from rich.table import Table
from rich.text import Text

from smsledger.core.models import BankProfile, ScanResult, ScanStatus, TransactionCandidate

# Every outcome ends in a soft notice, never a traceback.
_NOTICES = {
    ScanStatus.UNAVAILABLE: ("SMS scanning is not available on this device.", "yellow"),
    ScanStatus.DENIED: ("Permission needed: allow SMS access to scan bank messages.", "yellow"),
    ScanStatus.NO_BANKS: ("Add a bank with SMS sender IDs to start scanning.", "yellow"),
    ScanStatus.FAILED: ("Scan failed.", "red"),
}


def format_amount(amount: Decimal, currency: str = "SAR") -> str:
    return f"{currency} {amount:,.2f}"


def format_scan_notice(result: ScanResult, added: int) -> Text:
    """Return the one-line notice shown after a scan."""

    if result.status is ScanStatus.OK:
        if not result.candidates:
            return Text("No transactions found.", style="yellow")
        skipped = len(result.candidates) - added
        message = f"Found {len(result.candidates)} transactions, {added} new"
        if skipped:
            message += f", {skipped} already saved"
        return Text(f"{message}.", style="green")

    message, style = _NOTICES[result.status]
    if result.status is ScanStatus.FAILED and result.error:
        message = f"{message} ({result.error})"
    return Text(message, style=style)


def transactions_table(transactions: Iterable[TransactionCandidate], title: str = "Transactions") -> Table:
    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Amount", justify="right")
    table.add_column("Merchant")
    table.add_column("Category")
    table.add_column("Card")
    table.add_column("Bank")
    for tx in transactions:
        table.add_row(
            tx.date[:16].replace("T", " "),
            format_amount(tx.amount),
            tx.merchant,
            tx.category,
            f"•••• {tx.card_last4}" if tx.card_last4 else "",
            tx.bank_name,
        )
    return table


def banks_table(profiles: Iterable[BankProfile], language: str = "en") -> Table:
    table = Table(title="Banks")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("SMS sender IDs")
    for profile in profiles:
        senders = ", ".join(profile.sms_sender_ids) or "(manual only)"
        table.add_row(
            profile.id,
            Text(profile.display_name(language), style=profile.color),
            profile.kind,
            senders,
        )
    return table
