"""SQLite storage adapter.

Implements the core TransactionStorePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional

from smsledger.core.models import TransactionCandidate


class SQLiteTransactionStore:
    """Thin SQLite wrapper that satisfies the TransactionStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist."""

        with self._connect() as conn:
            # transactions is keyed by the candidate id ("sms-<source id>"),
            # which makes repeated scans of the same inbox idempotent.
            # Fields:
            # - id: dedup key (PRIMARY KEY)
            # - amount: decimal text, SAR
            # - merchant / category / card_last4: extracted fields
            # - bank_name: sender string used as display/grouping key
            # - date: ISO-8601 receipt time of the SMS
            # - source: origin tag, "SMS" for scanned messages
            # - source_text: original body kept for audit
            # - created_at: insertion time
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    amount TEXT NOT NULL,
                    merchant TEXT NOT NULL,
                    category TEXT NOT NULL,
                    card_last4 TEXT,
                    bank_name TEXT,
                    date TIMESTAMP NOT NULL,
                    source TEXT NOT NULL,
                    source_text TEXT,
                    created_at TIMESTAMP NOT NULL
                )
                """
            )

    def add_transactions(self, candidates: Iterable[TransactionCandidate]) -> int:
        """Insert candidates, ignoring ids already stored. Returns rows added."""

        created_at = datetime.now(timezone.utc).isoformat()
        added = 0
        with self._connect() as conn:
            for candidate in candidates:
                cur = conn.execute(
                    """
                    INSERT OR IGNORE INTO transactions (
                        id,
                        amount,
                        merchant,
                        category,
                        card_last4,
                        bank_name,
                        date,
                        source,
                        source_text,
                        created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        candidate.id,
                        str(candidate.amount),
                        candidate.merchant,
                        candidate.category,
                        candidate.card_last4,
                        candidate.bank_name,
                        candidate.date,
                        candidate.source,
                        candidate.source_text,
                        created_at,
                    ),
                )
                added += cur.rowcount
        return added

    def has_transaction(self, transaction_id: str) -> bool:
        """Check if a transaction id has already been stored."""

        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM transactions WHERE id = ?",
                (transaction_id,),
            ).fetchone()
        return row is not None

    def known_ids(self) -> set[str]:
        """Return every stored transaction id."""

        with self._connect() as conn:
            rows = conn.execute("SELECT id FROM transactions").fetchall()
        return {row["id"] for row in rows}

    def list_transactions(self, limit: Optional[int] = None) -> list[TransactionCandidate]:
        """Return stored transactions, newest first."""

        query = "SELECT * FROM transactions ORDER BY date DESC"
        params: tuple = ()
        if limit is not None:
            query += " LIMIT ?"
            params = (limit,)
        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [
            TransactionCandidate(
                id=row["id"],
                amount=Decimal(row["amount"]),
                merchant=row["merchant"],
                category=row["category"],
                bank_name=row["bank_name"],
                date=row["date"],
                source_text=row["source_text"],
                card_last4=row["card_last4"],
                source=row["source"],
            )
            for row in rows
        ]
