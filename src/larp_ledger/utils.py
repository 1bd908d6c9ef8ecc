"""Shared utility functions for the ledger."""
from __future__ import annotations

import json
from datetime import datetime, timezone


def safe_json(value, default=None):
    """Deserialize a JSON string if needed, or return default.

    Handles the common pattern where SQLite columns may contain JSON strings,
    Python objects, or NULL values.
    """
    if value is None:
        return default if default is not None else {}
    if isinstance(value, str):
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return default if default is not None else {}
    return value


def safe_list(value) -> list:
    """Deserialize a JSON array column, always returning a list."""
    result = safe_json(value, [])
    return list(result) if isinstance(result, (list, tuple)) else []


def now_iso() -> str:
    """UTC timestamp in ISO-8601 with a trailing Z."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")
