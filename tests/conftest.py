from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from pyexposure.config import ExposureConfig
from pyexposure.models import (
    ExposureConfiguration,
    ExposureInformation,
    ExposureSummary,
    SubmissionKeySet,
    SystemStatus,
    TemporaryExposureKey,
)
from pyexposure.service import ExposureNotificationService
from pyexposure.storage import MemorySecureStorage, MemoryStorage

NOW = datetime(2020, 5, 19, 7, 10, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class FakeBackend:
    calls: dict[str, int] = field(default_factory=dict)
    periods: list[int] = field(default_factory=list)
    configuration: ExposureConfiguration = field(default_factory=ExposureConfiguration)
    key_set: SubmissionKeySet = field(
        default_factory=lambda: SubmissionKeySet(
            server_public_key="serverPublicKey",
            client_private_key="clientPrivateKey",
            client_public_key="clientPublicKey",
        )
    )
    claim_error: Exception | None = None
    retrieve_error: Exception | None = None
    reported: list[tuple[SubmissionKeySet, list[TemporaryExposureKey]]] = field(default_factory=list)

    def _record_call(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def count(self, name: str) -> int:
        return self.calls.get(name, 0)

    async def get_exposure_configuration(self) -> ExposureConfiguration:
        self._record_call("get_exposure_configuration")
        await asyncio.sleep(0)
        return self.configuration

    async def retrieve_diagnosis_keys(self, period: int) -> str:
        self._record_call("retrieve_diagnosis_keys")
        if self.retrieve_error is not None:
            raise self.retrieve_error
        self.periods.append(period)
        return f"/keys/{period}.zip"

    async def claim_one_time_code(self, one_time_code: str) -> SubmissionKeySet:
        self._record_call("claim_one_time_code")
        if self.claim_error is not None:
            raise self.claim_error
        return self.key_set

    async def report_diagnosis_keys(self, key_set: SubmissionKeySet, keys: Sequence[TemporaryExposureKey]) -> None:
        self._record_call("report_diagnosis_keys")
        self.reported.append((key_set, list(keys)))


@dataclass
class FakeBridge:
    status: Any = SystemStatus.ACTIVE
    start_error: Exception | None = None
    status_error: Exception | None = None
    matching_files: dict[str, int] = field(default_factory=dict)
    exposures: list[ExposureInformation] = field(
        default_factory=lambda: [ExposureInformation(date_received=1589846400000, duration=15, total_risk_score=4)]
    )
    keys: list[TemporaryExposureKey] = field(
        default_factory=lambda: [TemporaryExposureKey(key_data="a2V5LWRhdGE=", rolling_start_number=2650032)]
    )
    start_calls: int = 0
    detected: list[list[str]] = field(default_factory=list)
    information_calls: int = 0

    async def start(self) -> None:
        self.start_calls += 1
        await asyncio.sleep(0)
        if self.start_error is not None:
            raise self.start_error

    async def get_status(self) -> Any:
        if self.status_error is not None:
            raise self.status_error
        return self.status

    async def detect_exposure(self, configuration: ExposureConfiguration, urls: Sequence[str]) -> ExposureSummary:
        self.detected.append(list(urls))
        matched = sum(self.matching_files.get(url, 0) for url in urls)
        return ExposureSummary(matched_key_count=matched, days_since_last_exposure=1 if matched else 0)

    async def get_exposure_information(self, summary: ExposureSummary) -> list[ExposureInformation]:
        self.information_calls += 1
        return list(self.exposures)

    async def get_temporary_exposure_key_history(self) -> list[TemporaryExposureKey]:
        return list(self.keys)


class RecordingNotifier:
    def __init__(self) -> None:
        self.presented: list[tuple[str, str]] = []

    def present_local_notification(self, *, title: str, body: str) -> None:
        self.presented.append((title, body))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def bridge() -> FakeBridge:
    return FakeBridge()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def secure_storage() -> MemorySecureStorage:
    return MemorySecureStorage()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def config(tmp_path: Any) -> ExposureConfig:
    return ExposureConfig(cache_dir=str(tmp_path / "cache"))


@pytest.fixture
def make_service(
    backend: FakeBackend,
    bridge: FakeBridge,
    storage: MemoryStorage,
    secure_storage: MemorySecureStorage,
    notifier: RecordingNotifier,
    clock: FakeClock,
    config: ExposureConfig,
) -> Callable[..., ExposureNotificationService]:
    def _make(**kwargs: Any) -> ExposureNotificationService:
        kwargs.setdefault("config", config)
        kwargs.setdefault("notifier", notifier)
        kwargs.setdefault("clock", clock)
        return ExposureNotificationService(backend, bridge, storage, secure_storage, **kwargs)

    return _make
