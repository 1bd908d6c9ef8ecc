"""Migration 002: Characters and the append-only experience ledger."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS characters (
            id                  TEXT PRIMARY KEY,
            user_id             TEXT NOT NULL REFERENCES users(id),
            name                TEXT NOT NULL,
            heritage_id         TEXT NOT NULL REFERENCES heritages(id),
            culture_id          TEXT NOT NULL REFERENCES cultures(id),
            archetype_id        TEXT NOT NULL REFERENCES archetypes(id),
            second_archetype_id TEXT REFERENCES archetypes(id),
            body                INTEGER NOT NULL,
            stamina             INTEGER NOT NULL,
            experience          INTEGER NOT NULL DEFAULT 0 CHECK (experience >= 0),
            total_xp_spent      INTEGER NOT NULL DEFAULT 0,
            skills              TEXT NOT NULL DEFAULT '[]',
            is_active           BOOLEAN NOT NULL DEFAULT 1,
            is_retired          BOOLEAN NOT NULL DEFAULT 0,
            retired_at          TEXT,
            retired_by          TEXT,
            retirement_reason   TEXT,
            created_at          TEXT NOT NULL,
            updated_at          TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_characters_user ON characters(user_id);

        CREATE TABLE IF NOT EXISTS experience_entries (
            id           TEXT PRIMARY KEY,
            character_id TEXT NOT NULL REFERENCES characters(id),
            amount       INTEGER NOT NULL,
            reason       TEXT NOT NULL,
            event_id     TEXT,
            rsvp_id      TEXT,
            awarded_by   TEXT NOT NULL,
            created_at   TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_experience_character
            ON experience_entries(character_id);
        CREATE INDEX IF NOT EXISTS idx_experience_rsvp
            ON experience_entries(rsvp_id);
    """)
