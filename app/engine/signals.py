"""
app/engine/signals.py — Elapsed-time signals derived from a client record.

Every function takes `now` explicitly; nothing in the engine reads the clock.
"""

from datetime import datetime, timedelta, timezone

from app.engine.models import ClientRecord

SECONDS_PER_DAY = 86400


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as SQLite hands them back) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def elapsed(now: datetime, since: datetime) -> timedelta:
    return as_utc(now) - as_utc(since)


def whole_days_between(now: datetime, since: datetime) -> int:
    """Whole days from `since` to `now`, floored. Future timestamps count as 0."""
    days = int(elapsed(now, since).total_seconds() // SECONDS_PER_DAY)
    return max(0, days)


def days_since_last_interaction(record: ClientRecord, now: datetime) -> int:
    return whole_days_between(now, record.last_interaction_at)


def days_as_client(record: ClientRecord, now: datetime) -> int:
    return whole_days_between(now, record.created_at)


def is_older_than(record: ClientRecord, now: datetime, days: int) -> bool:
    """True when the last interaction is strictly more than `days` days ago."""
    return elapsed(now, record.last_interaction_at) > timedelta(days=days)


def is_within(record: ClientRecord, now: datetime, days: int) -> bool:
    """True when the last interaction happened at most `days` days ago."""
    return elapsed(now, record.last_interaction_at) <= timedelta(days=days)
