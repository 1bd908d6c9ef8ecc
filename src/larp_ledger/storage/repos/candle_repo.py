from __future__ import annotations

import uuid

from larp_ledger.storage.database import Database
from larp_ledger.utils import now_iso


class CandleRepo:
    """Candle transactions plus the cached ``users.candles`` balance."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def _record(self, conn, user_id: str, amount: int, reason: str, created_by: str) -> str:
        tx_id = str(uuid.uuid4())
        conn.execute(
            "INSERT INTO candle_transactions (id, user_id, amount, reason, created_by, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (tx_id, user_id, amount, reason, created_by, now_iso()),
        )
        return tx_id

    def credit(self, user_id: str, amount: int, reason: str, created_by: str) -> str:
        with self.db.get_connection() as conn:
            conn.execute(
                "UPDATE users SET candles = candles + ? WHERE id = ?", (amount, user_id)
            )
            return self._record(conn, user_id, amount, reason, created_by)

    def debit(self, user_id: str, amount: int, reason: str, created_by: str) -> str | None:
        """Take ``amount`` candles if the user holds that many.

        Returns:
            The transaction id, or None when the balance was insufficient.
        """
        with self.db.get_connection() as conn:
            cur = conn.execute(
                "UPDATE users SET candles = candles - ? WHERE id = ? AND candles >= ?",
                (amount, user_id, amount),
            )
            if cur.rowcount != 1:
                return None
            return self._record(conn, user_id, -amount, reason, created_by)

    def balance(self, user_id: str) -> int | None:
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT candles FROM users WHERE id = ?", (user_id,)).fetchone()
        return int(row[0]) if row else None

    def history(self, user_id: str) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT t.*, a.player_name AS admin_name FROM candle_transactions t "
                "LEFT JOIN users a ON a.id = t.created_by "
                "WHERE t.user_id = ? ORDER BY t.created_at DESC, t.rowid DESC",
                (user_id,),
            ).fetchall()
        return [dict(r) for r in rows]
