"""In-process backend used in test mode.

Serves the default exposure configuration, empty key archives and a
freshly generated key pair for any one-time code. Reported keys are
kept in memory for inspection.
"""

from __future__ import annotations

import asyncio
import logging
import zipfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pyexposure._crypto import generate_key_pair
from pyexposure.bridge.archive import EXPORT_FILES
from pyexposure.config import ExposureConfig
from pyexposure.models.exposure import ExposureConfiguration, TemporaryExposureKey
from pyexposure.models.submission import SubmissionKeySet

_logger = logging.getLogger(__name__)


def _write_empty_archive(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        for name in EXPORT_FILES:
            zf.writestr(name, b"")


class MockBackend:
    def __init__(
        self,
        config: ExposureConfig | None = None,
        *,
        configuration: ExposureConfiguration | None = None,
    ) -> None:
        self._config = config or ExposureConfig()
        self.configuration = configuration or ExposureConfiguration()
        self.reported: list[list[TemporaryExposureKey]] = []

    async def __aenter__(self) -> MockBackend:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    async def get_exposure_configuration(self) -> ExposureConfiguration:
        return self.configuration

    async def retrieve_diagnosis_keys(self, period: int) -> str:
        path = Path(self._config.cache_dir) / "mock" / f"{period}.zip"
        await asyncio.to_thread(_write_empty_archive, path)
        return str(path)

    async def claim_one_time_code(self, one_time_code: str) -> SubmissionKeySet:
        _logger.debug("Mock backend accepting one-time code")
        client_private_key, client_public_key = generate_key_pair()
        _, server_public_key = generate_key_pair()
        return SubmissionKeySet(
            server_public_key=server_public_key,
            client_private_key=client_private_key,
            client_public_key=client_public_key,
        )

    async def report_diagnosis_keys(
        self,
        key_set: SubmissionKeySet,
        keys: Sequence[TemporaryExposureKey],
    ) -> None:
        self.reported.append(list(keys))
