"""Append-only transaction log with per-owner change subscriptions."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Callable

from ..models import Transaction
from .schema import ensure_schema

logger = logging.getLogger(__name__)

OnChange = Callable[[list[Transaction]], None]


class TransactionStore:
    """Manages the transactions table.

    Subscribers registered for an owner receive that owner's full
    transaction list (newest first) right away and again after every
    append for the same owner.
    """

    def __init__(
        self, db_path: str | Path = "~/.config/smartspend/smartspend.db"
    ) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._subscribers: dict[str, list[OnChange]] = {}

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        self._subscribers.clear()
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def append(self, transaction: Transaction) -> Transaction:
        """Insert a transaction and notify the owner's subscribers.

        Returns:
            The stored transaction with ``id`` and ``created_at`` filled in.
        """
        if transaction.date is None:
            raise ValueError("transaction date is required")

        conn = self._get_conn()
        cur = conn.execute(
            """INSERT INTO transactions
               (owner_id, name, amount, date, category, food_tag,
                is_impulse, estimated_calories, suggestion)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                transaction.owner_id,
                transaction.name,
                transaction.amount,
                transaction.date.isoformat(),
                transaction.category,
                transaction.food_tag,
                int(transaction.is_impulse),
                transaction.estimated_calories,
                transaction.suggestion,
            ),
        )
        conn.commit()

        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (cur.lastrowid,)
        ).fetchone()
        stored = Transaction.from_row(row)
        self._notify(transaction.owner_id)
        return stored

    def list_for_owner(self, owner_id: str) -> list[Transaction]:
        """Return the owner's transactions, newest first."""
        conn = self._get_conn()
        rows = conn.execute(
            """SELECT * FROM transactions
               WHERE owner_id = ?
               ORDER BY date DESC, id DESC""",
            (owner_id,),
        ).fetchall()
        return [Transaction.from_row(r) for r in rows]

    def subscribe(self, owner_id: str, on_change: OnChange) -> Callable[[], None]:
        """Register a live query for one owner.

        Returns:
            A callable that stops the subscription. Calling it twice is a
            no-op.
        """
        self._subscribers.setdefault(owner_id, []).append(on_change)
        on_change(self.list_for_owner(owner_id))

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(owner_id, [])
            if on_change in callbacks:
                callbacks.remove(on_change)
            if not callbacks:
                self._subscribers.pop(owner_id, None)

        return unsubscribe

    def _notify(self, owner_id: str) -> None:
        callbacks = list(self._subscribers.get(owner_id, []))
        if not callbacks:
            return
        transactions = self.list_for_owner(owner_id)
        for callback in callbacks:
            try:
                callback(transactions)
            except Exception:
                logger.exception("Transaction subscriber failed for %s", owner_id)
