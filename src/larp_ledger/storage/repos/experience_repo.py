from __future__ import annotations

import logging
import uuid
from typing import Optional

from larp_ledger.mechanics.experience import ENTRY_PURCHASE, entry_kind, ledger_totals
from larp_ledger.storage.database import Database
from larp_ledger.utils import now_iso

logger = logging.getLogger(__name__)

_BALANCE_SQL = (
    "SELECT COALESCE(SUM(amount), 0) FROM experience_entries WHERE character_id = ?"
)


class ExperienceRepo:
    """Append-only XP ledger.

    A character's balance is always ``SUM(amount)`` over its rows; the
    cached columns on ``characters`` are refreshed from here.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def append(
        self,
        character_id: str,
        amount: int,
        reason: str,
        awarded_by: str,
        event_id: Optional[str] = None,
        rsvp_id: Optional[str] = None,
        kind: Optional[str] = None,
    ) -> str:
        """Write one ledger row unconditionally and return its id.

        ``kind`` defaults to purchase for debits and award otherwise.
        """
        entry_id = str(uuid.uuid4())
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO experience_entries "
                "(id, character_id, amount, reason, kind, event_id, rsvp_id, awarded_by, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (entry_id, character_id, amount, reason, kind or entry_kind(amount),
                 event_id, rsvp_id, awarded_by, now_iso()),
            )
        return entry_id

    def spend(self, character_id: str, cost: int, reason: str, awarded_by: str) -> str | None:
        """Debit ``cost`` only if the balance covers it.

        The balance check and the insert are one statement, so two purchases
        racing for the same XP cannot both succeed.

        Returns:
            The new entry id, or None when the balance was insufficient.
        """
        entry_id = str(uuid.uuid4())
        with self.db.get_connection() as conn:
            cur = conn.execute(
                "INSERT INTO experience_entries "
                "(id, character_id, amount, reason, kind, event_id, rsvp_id, awarded_by, created_at) "
                "SELECT ?, ?, ?, ?, ?, NULL, NULL, ?, ? "
                f"WHERE ({_BALANCE_SQL}) >= ?",
                (entry_id, character_id, -cost, reason, ENTRY_PURCHASE, awarded_by, now_iso(),
                 character_id, cost),
            )
        if cur.rowcount != 1:
            logger.info("Rejected spend of %d XP on %s: %s", cost, character_id, reason)
            return None
        return entry_id

    def balance(self, character_id: str) -> int:
        with self.db.get_connection() as conn:
            row = conn.execute(_BALANCE_SQL, (character_id,)).fetchone()
        return int(row[0])

    def _amounts(self, character_id: str) -> list[tuple[int, str]]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT amount, kind FROM experience_entries WHERE character_id = ?",
                (character_id,),
            ).fetchall()
        return [(r["amount"], r["kind"]) for r in rows]

    def total_spent(self, character_id: str) -> int:
        """XP paid for skills, attributes and archetypes, net of refunds."""
        return ledger_totals(self._amounts(character_id))[1]

    def list_for_character(self, character_id: str) -> list[dict]:
        """Ledger rows newest first, with the linked event's name and date."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT x.*, e.name AS event_name, e.event_date AS event_date "
                "FROM experience_entries x LEFT JOIN events e ON e.id = x.event_id "
                "WHERE x.character_id = ? ORDER BY x.created_at DESC, x.rowid DESC",
                (character_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def list_for_event(self, character_id: str) -> list[dict]:
        """Rows linked to an event (attendance XP)."""
        return [r for r in self.list_for_character(character_id) if r.get("event_id")]

    def find_latest(self, character_id: str, reason: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM experience_entries WHERE character_id = ? AND reason = ? "
                "ORDER BY created_at DESC, rowid DESC LIMIT 1",
                (character_id, reason),
            ).fetchone()
        return dict(row) if row else None

    def sum_for_rsvp(self, rsvp_id: str) -> int:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT COALESCE(SUM(amount), 0) FROM experience_entries WHERE rsvp_id = ?",
                (rsvp_id,),
            ).fetchone()
        return int(row[0])

    def delete_by_rsvp(self, rsvp_id: str) -> int:
        with self.db.get_connection() as conn:
            cur = conn.execute("DELETE FROM experience_entries WHERE rsvp_id = ?", (rsvp_id,))
        return cur.rowcount

    def delete_by_character(self, character_id: str) -> int:
        with self.db.get_connection() as conn:
            cur = conn.execute(
                "DELETE FROM experience_entries WHERE character_id = ?", (character_id,)
            )
        return cur.rowcount

    def refresh_totals(self, character_id: str) -> tuple[int, int]:
        """Recompute the cached ``experience`` / ``total_xp_spent`` columns.

        Returns:
            (experience, total_xp_spent)
        """
        with self.db.get_connection() as conn:
            experience, spent = ledger_totals(self._amounts(character_id))
            conn.execute(
                "UPDATE characters SET experience = ?, total_xp_spent = ?, updated_at = ? "
                "WHERE id = ?",
                (experience, spent, now_iso(), character_id),
            )
        return experience, spent
