"""Exposure matching over backfilled diagnosis-key archives."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pyexposure._dates import utcnow
from pyexposure.backend.api import BackendInterface
from pyexposure.backfill import BackfillCursor
from pyexposure.bridge.api import ExposureNotificationBridge
from pyexposure.config import ExposureConfig
from pyexposure.models.status import ExposedStatus, MonitoringStatus

_logger = logging.getLogger(__name__)


class ExposureEvaluator:
    """Feeds key archives to the native capability, newest period first.

    Archives are fetched and matched strictly one at a time. The first
    summary with matched keys ends the pass: exposure details are read
    and no further period is fetched.
    """

    def __init__(
        self,
        backend: BackendInterface,
        bridge: ExposureNotificationBridge,
        config: ExposureConfig,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._backend = backend
        self._bridge = bridge
        self._config = config
        self._clock = clock

    async def evaluate(self, last_checked: datetime | None) -> MonitoringStatus | ExposedStatus:
        """Run one matching pass over the periods since *last_checked*.

        Backend and bridge errors propagate and abort the pass.
        """
        configuration = await self._backend.get_exposure_configuration()
        cursor = BackfillCursor.from_config(self._config, now=self._clock(), last_checked=last_checked)
        _logger.debug("Checking %d period(s) since %s", cursor.remaining, last_checked)

        while True:
            request = cursor.next()
            if request is None:
                break
            keys_file = await self._backend.retrieve_diagnosis_keys(request.period)
            summary = await self._bridge.detect_exposure(configuration, [keys_file])
            if summary.matched_key_count > 0:
                _logger.info(
                    "Exposure detected in period %d (%d matched keys)",
                    request.period,
                    summary.matched_key_count,
                )
                exposures = await self._bridge.get_exposure_information(summary)
                return ExposedStatus(exposures=exposures)

        return MonitoringStatus()
