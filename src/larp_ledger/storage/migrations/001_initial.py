from __future__ import annotations

import sqlite3

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS chapters (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL UNIQUE,
    code        TEXT NOT NULL UNIQUE,
    description TEXT,
    is_active   BOOLEAN NOT NULL DEFAULT 1,
    created_by  TEXT NOT NULL,
    created_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS users (
    id            TEXT PRIMARY KEY,
    username      TEXT NOT NULL UNIQUE,
    player_name   TEXT NOT NULL,
    email         TEXT NOT NULL UNIQUE,
    player_number TEXT UNIQUE,
    title         TEXT,
    chapter_id    TEXT REFERENCES chapters(id),
    is_admin      BOOLEAN NOT NULL DEFAULT 0,
    candles       INTEGER NOT NULL DEFAULT 0 CHECK (candles >= 0),
    created_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS skills (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL UNIQUE,
    description     TEXT,
    prerequisite_id TEXT REFERENCES skills(id)
);

CREATE TABLE IF NOT EXISTS heritages (
    id                   TEXT PRIMARY KEY,
    name                 TEXT NOT NULL UNIQUE,
    body                 INTEGER NOT NULL,
    stamina              INTEGER NOT NULL,
    description          TEXT NOT NULL DEFAULT '',
    costume_requirements TEXT NOT NULL DEFAULT '',
    benefit              TEXT NOT NULL DEFAULT '',
    weakness             TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS cultures (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    heritage_id TEXT NOT NULL REFERENCES heritages(id) ON DELETE CASCADE,
    description TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS archetypes (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL UNIQUE,
    description TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS heritage_skills (
    heritage_id TEXT NOT NULL REFERENCES heritages(id) ON DELETE CASCADE,
    skill_id    TEXT NOT NULL REFERENCES skills(id) ON DELETE CASCADE,
    tier        TEXT NOT NULL DEFAULT 'secondary',
    PRIMARY KEY (heritage_id, skill_id, tier)
);

CREATE TABLE IF NOT EXISTS culture_skills (
    culture_id TEXT NOT NULL REFERENCES cultures(id) ON DELETE CASCADE,
    skill_id   TEXT NOT NULL REFERENCES skills(id) ON DELETE CASCADE,
    tier       TEXT NOT NULL,
    PRIMARY KEY (culture_id, skill_id, tier)
);

CREATE TABLE IF NOT EXISTS archetype_skills (
    archetype_id TEXT NOT NULL REFERENCES archetypes(id) ON DELETE CASCADE,
    skill_id     TEXT NOT NULL REFERENCES skills(id) ON DELETE CASCADE,
    tier         TEXT NOT NULL,
    PRIMARY KEY (archetype_id, skill_id, tier)
);
"""


def upgrade(conn: sqlite3.Connection) -> None:
    """Execute the initial schema migration."""
    conn.executescript(_SCHEMA_SQL)
