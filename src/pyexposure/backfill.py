"""Backfill cursor over diagnosis-key periods.

The retrieval server addresses key archives by period index. After a
gap (app not run, device off) every period between the last successful
check and now has to be fetched, newest first. :class:`BackfillCursor`
produces those requests one at a time so the caller can stop as soon as
an exposure is found.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime

from pyexposure._constants import LOOKBACK_DAYS, PERIOD_HOURS, PERIODS_PER_FETCH
from pyexposure._dates import add_days, period_since_epoch
from pyexposure.config import ExposureConfig


@dataclasses.dataclass(frozen=True, slots=True)
class FetchRequest:
    period: int


class BackfillCursor:
    """One-shot, finite cursor walking backwards from *now*.

    Yields one :class:`FetchRequest` per step of *periods_per_fetch*
    periods, starting at the current period and stopping before the
    period of *last_checked*. Without a last check, or with one older
    than *lookback_days*, the look-back window is used instead.

    The cursor is not restartable: once exhausted it stays exhausted.
    """

    def __init__(
        self,
        *,
        now: datetime,
        last_checked: datetime | None = None,
        period_hours: int = PERIOD_HOURS,
        periods_per_fetch: int = PERIODS_PER_FETCH,
        lookback_days: int = LOOKBACK_DAYS,
    ) -> None:
        earliest = add_days(now, -lookback_days)
        since = last_checked if last_checked is not None and last_checked > earliest else earliest
        self._last_period = period_since_epoch(since, period_hours)
        self._running_period = period_since_epoch(now, period_hours)
        self._step = periods_per_fetch

    @classmethod
    def from_config(
        cls,
        config: ExposureConfig,
        *,
        now: datetime,
        last_checked: datetime | None,
    ) -> BackfillCursor:
        return cls(
            now=now,
            last_checked=last_checked,
            period_hours=config.period_hours,
            periods_per_fetch=config.periods_per_fetch,
            lookback_days=config.lookback_days,
        )

    @property
    def remaining(self) -> int:
        """Number of requests still to be produced."""
        gap = self._running_period - self._last_period
        if gap <= 0:
            return 0
        return -(-gap // self._step)

    def next(self) -> FetchRequest | None:
        """Next request, or ``None`` when the gap is covered."""
        if self._running_period <= self._last_period:
            return None
        request = FetchRequest(period=self._running_period)
        self._running_period -= self._step
        return request

    def __iter__(self) -> BackfillCursor:
        return self

    def __next__(self) -> FetchRequest:
        request = self.next()
        if request is None:
            raise StopIteration
        return request
