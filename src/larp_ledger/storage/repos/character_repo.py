from __future__ import annotations

import json
from typing import Any

from larp_ledger.storage.database import Database
from larp_ledger.utils import now_iso, safe_list

_JSON_FIELDS = frozenset({"skills"})


def _serialize(data: dict) -> dict:
    """Return a copy with JSON fields serialized to strings."""
    out = dict(data)
    for field in _JSON_FIELDS:
        if field in out and out[field] is not None and not isinstance(out[field], str):
            out[field] = json.dumps(out[field])
    return out


def _deserialize(row: Any) -> dict | None:
    """Convert a sqlite3.Row to a dict with JSON fields parsed."""
    if row is None:
        return None
    result = dict(row)
    for field in _JSON_FIELDS:
        result[field] = safe_list(result.get(field))
    return result


class CharacterRepo:
    """Repository for character records.

    ``experience`` and ``total_xp_spent`` are caches of the ledger and are
    only written through :meth:`ExperienceRepo.refresh_totals`.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def save(self, character_dict: dict) -> None:
        """Insert or update a character record (UPSERT)."""
        data = _serialize(character_dict)
        columns = ", ".join(data.keys())
        placeholders = ", ".join("?" for _ in data)
        updates = ", ".join(f"{k} = excluded.{k}" for k in data if k != "id")
        sql = (
            f"INSERT INTO characters ({columns}) VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}"
        )
        with self.db.get_connection() as conn:
            conn.execute(sql, list(data.values()))

    def get(self, character_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT c.*, u.player_name AS player_name FROM characters c "
                "JOIN users u ON u.id = c.user_id WHERE c.id = ?",
                (character_id,),
            ).fetchone()
        return _deserialize(row)

    def list_by_user(self, user_id: str) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT c.*, u.player_name AS player_name FROM characters c "
                "JOIN users u ON u.id = c.user_id WHERE c.user_id = ? "
                "ORDER BY c.created_at",
                (user_id,),
            ).fetchall()
        return [_deserialize(r) for r in rows]

    def list_all(self, include_retired: bool = True) -> list[dict]:
        sql = (
            "SELECT c.*, u.player_name AS player_name FROM characters c "
            "JOIN users u ON u.id = c.user_id"
        )
        if not include_retired:
            sql += " WHERE c.is_retired = 0"
        with self.db.get_connection() as conn:
            rows = conn.execute(sql + " ORDER BY c.name").fetchall()
        return [_deserialize(r) for r in rows]

    def update_fields(self, character_id: str, **fields: Any) -> None:
        """Update several columns on a character and bump ``updated_at``."""
        data = _serialize(fields)
        data["updated_at"] = now_iso()
        assignments = ", ".join(f"{k} = ?" for k in data)
        with self.db.get_connection() as conn:
            conn.execute(
                f"UPDATE characters SET {assignments} WHERE id = ?",
                [*data.values(), character_id],
            )

    def delete(self, character_id: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM characters WHERE id = ?", (character_id,))
