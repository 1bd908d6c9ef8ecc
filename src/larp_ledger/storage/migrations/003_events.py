"""Migration 003: Events and RSVPs."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS events (
            id          TEXT PRIMARY KEY,
            name        TEXT NOT NULL,
            description TEXT,
            event_date  TEXT NOT NULL,
            location    TEXT,
            is_active   BOOLEAN NOT NULL DEFAULT 1,
            created_by  TEXT NOT NULL,
            created_at  TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS event_rsvps (
            id                  TEXT PRIMARY KEY,
            event_id            TEXT NOT NULL REFERENCES events(id),
            character_id        TEXT NOT NULL REFERENCES characters(id),
            user_id             TEXT NOT NULL REFERENCES users(id),
            xp_purchases        INTEGER NOT NULL DEFAULT 0,
            xp_candle_purchases INTEGER NOT NULL DEFAULT 0,
            attended            BOOLEAN,
            created_at          TEXT NOT NULL,
            updated_at          TEXT NOT NULL,
            UNIQUE(event_id, character_id)
        );
    """)
