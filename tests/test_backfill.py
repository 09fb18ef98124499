from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from pyexposure._dates import period_since_epoch
from pyexposure.backfill import BackfillCursor, FetchRequest
from pyexposure.config import ExposureConfig

NOW = datetime(2020, 5, 19, 7, 10, tzinfo=UTC)


def test_default_lookback_without_last_check() -> None:
    cursor = BackfillCursor(now=NOW)

    requests = list(cursor)

    current = period_since_epoch(NOW, 12)
    assert len(requests) == 14
    assert requests[0] == FetchRequest(period=current)
    assert [r.period for r in requests] == [current - 2 * i for i in range(14)]


def test_same_period_yields_nothing() -> None:
    cursor = BackfillCursor(now=NOW, last_checked=datetime(2020, 5, 19, 6, 10, tzinfo=UTC))

    assert cursor.remaining == 0
    assert cursor.next() is None


@pytest.mark.parametrize(("days", "expected"), [(1, 1), (2, 2), (7, 7), (14, 14), (30, 14)])
def test_fetch_count_is_days_since_last_check_capped_by_lookback(days: int, expected: int) -> None:
    cursor = BackfillCursor(now=NOW, last_checked=NOW - timedelta(days=days))

    assert cursor.remaining == expected
    assert len(list(cursor)) == expected


def test_previous_half_day_bucket_needs_one_fetch() -> None:
    cursor = BackfillCursor(now=NOW, last_checked=datetime(2020, 5, 18, 23, 10, tzinfo=UTC))

    assert [r.period for r in cursor] == [period_since_epoch(NOW, 12)]


def test_last_check_in_the_future_yields_nothing() -> None:
    cursor = BackfillCursor(now=NOW, last_checked=NOW + timedelta(days=2))

    assert list(cursor) == []


def test_cursor_is_not_restartable() -> None:
    cursor = BackfillCursor(now=NOW, last_checked=NOW - timedelta(days=3))

    assert len(list(cursor)) == 3
    assert list(cursor) == []
    assert cursor.remaining == 0


def test_from_config_uses_configured_window() -> None:
    config = ExposureConfig(period_hours=24, periods_per_fetch=1, lookback_days=5)

    cursor = BackfillCursor.from_config(config, now=NOW, last_checked=None)

    periods = [r.period for r in cursor]
    assert periods[0] == period_since_epoch(NOW, 24)
    assert len(periods) == 5
