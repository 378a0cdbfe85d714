"""Application entry point for the smsledger scanner."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import re
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from rich.console import Console

from smsledger import settings
from smsledger.adapters.console_output import (
    banks_table,
    format_amount,
    format_scan_notice,
    transactions_table,
)
from smsledger.adapters.sqlite_storage import SQLiteTransactionStore
from smsledger.core.dedup import filter_new_candidates
from smsledger.core.models import ScanStatus
from smsledger.core.parser import parse
from smsledger.core.scanner import SmsScanner
from smsledger.inbox import build_inbox

NAME = "SMSLEDGER"
FONT = "tarty-1"

console = Console()


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    """Mask account-number-like digit runs, keeping the last four digits."""

    _ACCOUNT = re.compile(r"(?<!\d)(?:SA\d{2})?\d{4,}(\d{4})(?!\d)")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return self._ACCOUNT.sub(r"***\1", message)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/smsledger.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.CONFIG_DIR, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _open_store() -> SQLiteTransactionStore:
    store = SQLiteTransactionStore(settings.DB_PATH)
    store.init_db()
    return store


def _scan() -> int:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)
    logger.info("%s banks are configured", len(settings.BANKS))

    store = _open_store()
    inbox = build_inbox(
        settings.INBOX_PROVIDER,
        settings.INBOX_PATH,
        skip_malformed=settings.SCAN_CONFIG.partial_results,
        timeout_seconds=settings.SCAN_CONFIG.fetch_timeout_seconds,
    )
    scanner = SmsScanner(inbox, settings.SCAN_CONFIG)

    result = asyncio.run(scanner.scan(settings.BANKS))

    added = 0
    if result.status is ScanStatus.OK and result.candidates:
        fresh = filter_new_candidates(result.candidates, store.known_ids())
        added = store.add_transactions(fresh)
        if fresh:
            console.print(transactions_table(fresh, title="New transactions"))

    console.print(format_scan_notice(result, added))
    return 1 if result.status is ScanStatus.FAILED else 0


def _parse(sender: str, body: str, save: bool = False) -> int:
    candidate = parse(body, sender)
    if candidate is None:
        console.print("[yellow]No transaction found in this message.[/yellow]")
        return 0
    console.print(f"[bold]Amount:[/bold]   {format_amount(candidate.amount)}")
    console.print(f"[bold]Merchant:[/bold] {candidate.merchant}")
    console.print(f"[bold]Category:[/bold] {candidate.category}")
    console.print(f"[bold]Card:[/bold]     {candidate.card_last4 or '-'}")
    console.print(f"[bold]Bank:[/bold]     {candidate.bank_name or '-'}")
    if not save:
        return 0

    store = _open_store()
    if store.has_transaction(candidate.id):
        console.print("[yellow]Already saved.[/yellow]")
    else:
        store.add_transactions([candidate])
        console.print("[green]Saved.[/green]")
    return 0


def _banks() -> int:
    console.print(banks_table(settings.BANKS, settings.LANGUAGE))
    return 0


def _history(limit: int) -> int:
    store = _open_store()
    transactions = store.list_transactions(limit)
    if not transactions:
        console.print("[yellow]No transactions saved yet.[/yellow]")
        return 0
    console.print(transactions_table(transactions))
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="smsledger")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("scan", help="Scan the SMS inbox for bank transactions")
    parse_parser = subparsers.add_parser("parse", help="Parse a single SMS body")
    parse_parser.add_argument("--sender", default="", help="SMS sender id")
    parse_parser.add_argument("--save", action="store_true", help="Store the parsed transaction")
    parse_parser.add_argument("body", help="SMS body text")
    subparsers.add_parser("banks", help="List configured banks and their sender IDs")
    history_parser = subparsers.add_parser("history", help="Show saved transactions")
    history_parser.add_argument("--limit", type=int, default=50)

    args = parser.parse_args(argv)
    if args.command == "parse":
        sys.exit(_parse(args.sender, args.body, args.save))
    if args.command == "banks":
        sys.exit(_banks())
    if args.command == "history":
        sys.exit(_history(args.limit))
    sys.exit(_scan())


if __name__ == "__main__":
    main()
