"""Tests for src/larp_ledger/storage/database.py."""
from __future__ import annotations

from larp_ledger.storage.database import _MIGRATIONS


def _add_chapter(conn, chapter_id: str) -> None:
    conn.execute(
        "INSERT INTO chapters (id, name, code, created_by, created_at) "
        "VALUES (?, ?, ?, 'system', '2025-01-01')",
        (chapter_id, f"Chapter {chapter_id}", chapter_id.upper()[:2]),
    )


class TestDatabaseInitialize:
    def test_all_migrations_applied(self, in_memory_db):
        with in_memory_db.get_connection() as conn:
            versions = {
                r[0] for r in conn.execute("SELECT version FROM schema_version").fetchall()
            }
        assert versions == set(range(1, len(_MIGRATIONS) + 1))

    def test_idempotent_rerun(self, in_memory_db):
        in_memory_db.initialize()
        with in_memory_db.get_connection() as conn:
            versions = conn.execute("SELECT count(*) FROM schema_version").fetchone()[0]
        assert versions == len(_MIGRATIONS)

    def test_key_tables_exist(self, in_memory_db):
        expected_tables = [
            "users", "chapters", "skills", "heritages", "cultures", "archetypes",
            "heritage_skills", "culture_skills", "archetype_skills",
            "characters", "experience_entries", "events", "event_rsvps",
            "candle_transactions", "system_settings",
        ]
        with in_memory_db.get_connection() as conn:
            tables = {
                r[0] for r in conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table'"
                ).fetchall()
            }
        for table in expected_tables:
            assert table in tables, f"Missing table: {table}"


class TestGetConnection:
    def test_commits_on_success(self, in_memory_db):
        with in_memory_db.get_connection() as conn:
            _add_chapter(conn, "aa")
        with in_memory_db.get_connection() as conn:
            row = conn.execute("SELECT id FROM chapters WHERE id='aa'").fetchone()
        assert row is not None

    def test_rollback_on_error(self, in_memory_db):
        try:
            with in_memory_db.get_connection() as conn:
                _add_chapter(conn, "bb")
                raise ValueError("Intentional error")
        except ValueError:
            pass
        with in_memory_db.get_connection() as conn:
            row = conn.execute("SELECT id FROM chapters WHERE id='bb'").fetchone()
        assert row is None

    def test_nested_blocks_share_one_transaction(self, in_memory_db):
        try:
            with in_memory_db.get_connection():
                with in_memory_db.get_connection() as inner:
                    _add_chapter(inner, "cc")
                raise ValueError("outer fails after inner finished")
        except ValueError:
            pass
        with in_memory_db.get_connection() as conn:
            row = conn.execute("SELECT id FROM chapters WHERE id='cc'").fetchone()
        assert row is None
