from __future__ import annotations

import json
from typing import Any

from larp_ledger.storage.database import Database
from larp_ledger.utils import now_iso, safe_json


class SettingsRepo:
    """Key/value system settings stored as JSON."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def get(self, key: str) -> Any:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM system_settings WHERE key = ?", (key,)
            ).fetchone()
        return safe_json(row["value"]) if row else None

    def set(self, key: str, value: Any, updated_by: str | None = None) -> None:
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO system_settings (key, value, updated_by, updated_at) "
                "VALUES (?, ?, ?, ?) ON CONFLICT(key) DO UPDATE SET "
                "value = excluded.value, updated_by = excluded.updated_by, "
                "updated_at = excluded.updated_at",
                (key, json.dumps(value), updated_by, now_iso()),
            )
