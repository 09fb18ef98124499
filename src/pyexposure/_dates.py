"""Calendar and diagnosis-key period arithmetic.

All datetimes handled by pyexposure are timezone-aware. Persisted
timestamps are epoch milliseconds rendered as decimal strings.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo
from typing import Any

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)
_MS_PER_HOUR = 3600 * 1000


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_epoch_ms(value: datetime) -> int:
    """Exact epoch milliseconds of an aware datetime."""
    return (value - _EPOCH) // _ONE_MS


def from_epoch_ms(value: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=value)


def parse_epoch_ms(value: Any) -> datetime | None:
    """Parse a persisted epoch-millis value.

    Returns ``None`` when the value is absent or not numeric.
    """
    if value is None or value == "":
        return None
    try:
        ms = int(value)
    except (TypeError, ValueError):
        return None
    return from_epoch_ms(ms)


def add_days(value: datetime, days: int) -> datetime:
    return value + timedelta(days=days)


def period_since_epoch(value: datetime, hours: int) -> int:
    """Index of the *hours*-long bucket containing *value*."""
    return to_epoch_ms(value) // (hours * _MS_PER_HOUR)


def hours_since_epoch(value: datetime) -> int:
    return period_since_epoch(value, 1)


def days_between(start: datetime, end: datetime, tz: tzinfo = UTC) -> int:
    """Calendar-day difference between *start* and *end* as seen in *tz*.

    Elapsed hours do not matter: 23:50 to 00:10 the next day is one day,
    00:10 to 23:50 the same day is zero.
    """
    return (end.astimezone(tz).date() - start.astimezone(tz).date()).days
