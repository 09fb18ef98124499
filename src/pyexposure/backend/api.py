"""Contract of the diagnosis-key backend."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from pyexposure.models.exposure import ExposureConfiguration, TemporaryExposureKey
from pyexposure.models.submission import SubmissionKeySet


class BackendInterface(Protocol):
    """Structural backend interface used by the evaluator and submission cycle.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`BackendService`) concrete.
    """

    async def get_exposure_configuration(self) -> ExposureConfiguration: ...

    async def retrieve_diagnosis_keys(self, period: int) -> str:
        """Download the key archive for *period*; returns a local file reference."""
        ...

    async def claim_one_time_code(self, one_time_code: str) -> SubmissionKeySet: ...

    async def report_diagnosis_keys(
        self,
        key_set: SubmissionKeySet,
        keys: Sequence[TemporaryExposureKey],
    ) -> None: ...
