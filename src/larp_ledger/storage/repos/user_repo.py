from __future__ import annotations

from typing import Any

from larp_ledger.storage.database import Database


def _row(row: Any) -> dict | None:
    return dict(row) if row is not None else None


class UserRepo:
    """Repository for users and the chapters they belong to."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # -- Chapters --

    def create_chapter(self, chapter: dict) -> None:
        columns = ", ".join(chapter.keys())
        placeholders = ", ".join("?" for _ in chapter)
        with self.db.get_connection() as conn:
            conn.execute(
                f"INSERT INTO chapters ({columns}) VALUES ({placeholders})",
                list(chapter.values()),
            )

    def get_chapter(self, chapter_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM chapters WHERE id = ?", (chapter_id,)
            ).fetchone()
        return _row(row)

    def get_chapter_by_code(self, code: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM chapters WHERE code = ?", (code.upper(),)
            ).fetchone()
        return _row(row)

    def list_chapters(self) -> list[dict]:
        """All chapters with a ``member_count`` column."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT c.*, COUNT(u.id) AS member_count FROM chapters c "
                "LEFT JOIN users u ON u.chapter_id = c.id "
                "GROUP BY c.id ORDER BY c.name"
            ).fetchall()
        return [dict(r) for r in rows]

    # -- Users --

    def create(self, user: dict) -> None:
        columns = ", ".join(user.keys())
        placeholders = ", ".join("?" for _ in user)
        with self.db.get_connection() as conn:
            conn.execute(
                f"INSERT INTO users ({columns}) VALUES ({placeholders})",
                list(user.values()),
            )

    def get(self, user_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return _row(row)

    def get_by_username(self, username: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE username = ?", (username,)
            ).fetchone()
        return _row(row)

    def list_all(self) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute("SELECT * FROM users ORDER BY username").fetchall()
        return [dict(r) for r in rows]

    def chapter_members(self, chapter_id: str) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM users WHERE chapter_id = ? ORDER BY player_number",
                (chapter_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def last_player_number(self, prefix: str) -> str | None:
        """Highest player number starting with ``prefix`` (code + YYMM)."""
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT MAX(player_number) FROM users WHERE player_number LIKE ?",
                (f"{prefix}%",),
            ).fetchone()
        return row[0] if row else None
