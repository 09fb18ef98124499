"""Contract of the native exposure-matching capability."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from pyexposure.models.exposure import (
    ExposureConfiguration,
    ExposureInformation,
    ExposureSummary,
    TemporaryExposureKey,
)
from pyexposure.models.status import SystemStatus


class ExposureNotificationBridge(Protocol):
    """Structural interface of the platform exposure-notification API.

    Implementations wrap the platform framework; tests pass fakes.
    """

    async def start(self) -> None: ...

    async def get_status(self) -> SystemStatus: ...

    async def detect_exposure(
        self,
        configuration: ExposureConfiguration,
        diagnosis_key_urls: Sequence[str],
    ) -> ExposureSummary: ...

    async def get_exposure_information(self, summary: ExposureSummary) -> list[ExposureInformation]: ...

    async def get_temporary_exposure_key_history(self) -> list[TemporaryExposureKey]: ...
