from __future__ import annotations

from typing import Any

from larp_ledger.storage.database import Database
from larp_ledger.utils import now_iso


def _insert(conn: Any, table: str, data: dict) -> None:
    columns = ", ".join(data.keys())
    placeholders = ", ".join("?" for _ in data)
    conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", list(data.values()))


class EventRepo:
    """Repository for events and their RSVPs."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # -- Events --

    def create(self, event: dict) -> None:
        with self.db.get_connection() as conn:
            _insert(conn, "events", event)

    def get(self, event_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
        return dict(row) if row else None

    def list_events(self, active_only: bool = False) -> list[dict]:
        sql = "SELECT * FROM events"
        if active_only:
            sql += " WHERE is_active = 1"
        with self.db.get_connection() as conn:
            rows = conn.execute(sql + " ORDER BY event_date").fetchall()
        return [dict(r) for r in rows]

    def update_fields(self, event_id: str, **fields: Any) -> None:
        assignments = ", ".join(f"{k} = ?" for k in fields)
        with self.db.get_connection() as conn:
            conn.execute(
                f"UPDATE events SET {assignments} WHERE id = ?",
                [*fields.values(), event_id],
            )

    # -- RSVPs --

    def create_rsvp(self, rsvp: dict) -> None:
        with self.db.get_connection() as conn:
            _insert(conn, "event_rsvps", rsvp)

    def get_rsvp(self, rsvp_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT * FROM event_rsvps WHERE id = ?", (rsvp_id,)).fetchone()
        return dict(row) if row else None

    def find_rsvp(self, event_id: str, character_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM event_rsvps WHERE event_id = ? AND character_id = ?",
                (event_id, character_id),
            ).fetchone()
        return dict(row) if row else None

    def list_rsvps(self, event_id: str) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM event_rsvps WHERE event_id = ? ORDER BY created_at",
                (event_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def list_rsvps_for_character(self, character_id: str) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM event_rsvps WHERE character_id = ? ORDER BY created_at",
                (character_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def set_attended(self, rsvp_id: str, attended: bool | None) -> None:
        with self.db.get_connection() as conn:
            conn.execute(
                "UPDATE event_rsvps SET attended = ?, updated_at = ? WHERE id = ?",
                (attended, now_iso(), rsvp_id),
            )

    def attended_count(self, character_id: str) -> int:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM event_rsvps WHERE character_id = ? AND attended = 1",
                (character_id,),
            ).fetchone()
        return int(row[0])

    def delete_rsvp(self, rsvp_id: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM event_rsvps WHERE id = ?", (rsvp_id,))

    def delete_by_character(self, character_id: str) -> int:
        with self.db.get_connection() as conn:
            cur = conn.execute(
                "DELETE FROM event_rsvps WHERE character_id = ?", (character_id,)
            )
        return cur.rowcount
