"""Time helpers shared by models and reports."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime (SQLite stores naive values)."""

    return datetime.now(timezone.utc).replace(tzinfo=None)
