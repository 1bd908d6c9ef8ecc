"""Migration 005: Classify experience entries as award, purchase or refund."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        ALTER TABLE experience_entries ADD COLUMN kind TEXT NOT NULL DEFAULT 'award';

        UPDATE experience_entries SET kind = 'purchase' WHERE amount < 0;
        UPDATE experience_entries SET kind = 'refund' WHERE reason LIKE 'Skill refund:%';
    """)
