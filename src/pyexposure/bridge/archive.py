"""Bridge adapter that unpacks diagnosis-key archives before detection.

Some platforms cannot read the zip archives served by the retrieval
server; they want the ``export.bin`` / ``export.sig`` pair instead.
:class:`ArchiveUnpackingBridge` sits in front of such a bridge and does
the unpacking; every other call is passed through.
"""

from __future__ import annotations

import asyncio
import logging
import zipfile
from collections.abc import Sequence
from pathlib import Path

from pyexposure.bridge.api import ExposureNotificationBridge
from pyexposure.exceptions import ExposureBridgeError
from pyexposure.models.exposure import (
    ExposureConfiguration,
    ExposureInformation,
    ExposureSummary,
    TemporaryExposureKey,
)
from pyexposure.models.status import SystemStatus

_logger = logging.getLogger(__name__)

EXPORT_DIR_NAME = "keys-export"
EXPORT_FILES = ("export.bin", "export.sig")


def _local_path(reference: str) -> Path:
    if reference.startswith("file://"):
        reference = reference[len("file://") :]
    return Path(reference)


def unpack_archive(reference: str) -> list[str]:
    """Extract a key archive into a sibling ``keys-export`` directory.

    Returns
    -------
    list[str]
        Paths of ``export.bin`` and ``export.sig`` inside the directory.

    Raises
    ------
    ExposureBridgeError
        If the archive is unreadable or lacks one of the export files.
    """
    archive = _local_path(reference)
    target = archive.parent / EXPORT_DIR_NAME
    try:
        with zipfile.ZipFile(archive) as zf:
            names = set(zf.namelist())
            missing = [name for name in EXPORT_FILES if name not in names]
            if missing:
                raise ExposureBridgeError(f"Key archive {archive} is missing {', '.join(missing)}")
            target.mkdir(parents=True, exist_ok=True)
            zf.extractall(target, members=list(EXPORT_FILES))
    except (OSError, zipfile.BadZipFile) as exc:
        raise ExposureBridgeError(f"Cannot unpack key archive {archive}: {exc}") from exc
    return [str(target / name) for name in EXPORT_FILES]


class ArchiveUnpackingBridge:
    """Wraps a bridge so ``detect_exposure`` receives unpacked export files."""

    def __init__(self, bridge: ExposureNotificationBridge) -> None:
        self._bridge = bridge

    async def start(self) -> None:
        await self._bridge.start()

    async def get_status(self) -> SystemStatus:
        return await self._bridge.get_status()

    async def detect_exposure(
        self,
        configuration: ExposureConfiguration,
        diagnosis_key_urls: Sequence[str],
    ) -> ExposureSummary:
        if not diagnosis_key_urls:
            raise ExposureBridgeError("detect_exposure called with an empty list of downloaded files")
        # One archive per call; the export directory is reused between calls.
        files = await asyncio.to_thread(unpack_archive, diagnosis_key_urls[0])
        _logger.debug("Unpacked %s into %s", diagnosis_key_urls[0], files[0])
        return await self._bridge.detect_exposure(configuration, files)

    async def get_exposure_information(self, summary: ExposureSummary) -> list[ExposureInformation]:
        return await self._bridge.get_exposure_information(summary)

    async def get_temporary_exposure_key_history(self) -> list[TemporaryExposureKey]:
        return await self._bridge.get_temporary_exposure_key_history()
