from __future__ import annotations

from datetime import timedelta

import pytest

from pyexposure._dates import period_since_epoch
from pyexposure.config import ExposureConfig
from pyexposure.evaluator import ExposureEvaluator
from pyexposure.exceptions import ExposureTransportError
from pyexposure.models import ExposedStatus, MonitoringStatus

from conftest import NOW, FakeBackend, FakeBridge, FakeClock


def _evaluator(backend: FakeBackend, bridge: FakeBridge, clock: FakeClock) -> ExposureEvaluator:
    return ExposureEvaluator(backend, bridge, ExposureConfig(), clock=clock)


@pytest.mark.asyncio
async def test_no_match_scans_full_lookback_one_file_at_a_time(
    backend: FakeBackend, bridge: FakeBridge, clock: FakeClock
) -> None:
    result = await _evaluator(backend, bridge, clock).evaluate(None)

    assert isinstance(result, MonitoringStatus)
    assert backend.count("get_exposure_configuration") == 1
    assert backend.count("retrieve_diagnosis_keys") == 14
    assert all(len(files) == 1 for files in bridge.detected)
    assert backend.periods == sorted(backend.periods, reverse=True)
    assert bridge.information_calls == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("days", [0, 1, 5, 14])
async def test_fetch_count_follows_days_since_last_check(
    backend: FakeBackend, bridge: FakeBridge, clock: FakeClock, days: int
) -> None:
    await _evaluator(backend, bridge, clock).evaluate(NOW - timedelta(days=days))

    assert backend.count("retrieve_diagnosis_keys") == min(days, 14)


@pytest.mark.asyncio
async def test_match_on_second_oldest_period_stops_the_pass(
    backend: FakeBackend, bridge: FakeBridge, clock: FakeClock
) -> None:
    current = period_since_epoch(NOW, 12)
    periods = [current - 2 * i for i in range(14)]
    second_oldest = periods[-2]
    bridge.matching_files = {f"/keys/{second_oldest}.zip": 3}

    result = await _evaluator(backend, bridge, clock).evaluate(None)

    assert isinstance(result, ExposedStatus)
    assert result.exposures == bridge.exposures
    assert backend.periods == periods[:-1]
    assert len(bridge.detected) == 13
    assert bridge.information_calls == 1


@pytest.mark.asyncio
async def test_match_on_newest_period_fetches_nothing_else(
    backend: FakeBackend, bridge: FakeBridge, clock: FakeClock
) -> None:
    current = period_since_epoch(NOW, 12)
    bridge.matching_files = {f"/keys/{current}.zip": 1}

    result = await _evaluator(backend, bridge, clock).evaluate(None)

    assert isinstance(result, ExposedStatus)
    assert backend.periods == [current]


@pytest.mark.asyncio
async def test_fetch_failure_aborts_the_pass(backend: FakeBackend, bridge: FakeBridge, clock: FakeClock) -> None:
    backend.retrieve_error = ExposureTransportError("HTTP 500", status_code=500, endpoint="/retrieve")

    with pytest.raises(ExposureTransportError):
        await _evaluator(backend, bridge, clock).evaluate(None)

    assert backend.count("retrieve_diagnosis_keys") == 1
    assert bridge.detected == []
