"""Post-diagnosis submission cycle.

After a positive diagnosis the user claims a one-time code and then
uploads this device's keys once per calendar day until the cycle ends.
Two timestamps are persisted: when the cycle started and when keys were
last uploaded. The cycle end is always derived from the start.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pydantic import ValidationError

from pyexposure._constants import (
    SUBMISSION_AUTH_KEYS,
    SUBMISSION_CYCLE_STARTED_AT,
    SUBMISSION_LAST_COMPLETED_AT,
)
from pyexposure._dates import add_days, days_between, parse_epoch_ms, to_epoch_ms, utcnow
from pyexposure.backend.api import BackendInterface
from pyexposure.bridge.api import ExposureNotificationBridge
from pyexposure.config import ExposureConfig
from pyexposure.exceptions import NoSubmissionKeysError
from pyexposure.models.status import DiagnosedStatus
from pyexposure.models.submission import SubmissionKeySet
from pyexposure.storage import PersistencyProvider, SecurePersistencyProvider

_logger = logging.getLogger(__name__)


class SubmissionCycleManager:
    def __init__(
        self,
        backend: BackendInterface,
        bridge: ExposureNotificationBridge,
        storage: PersistencyProvider,
        secure_storage: SecurePersistencyProvider,
        config: ExposureConfig,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._backend = backend
        self._bridge = bridge
        self._storage = storage
        self._secure_storage = secure_storage
        self._config = config
        self._clock = clock

    # ------------------------------------------------------------------
    # Persisted timestamps
    # ------------------------------------------------------------------

    async def cycle_started_at(self) -> datetime | None:
        return parse_epoch_ms(await self._storage.get_item(SUBMISSION_CYCLE_STARTED_AT))

    async def last_completed_at(self) -> datetime | None:
        return parse_epoch_ms(await self._storage.get_item(SUBMISSION_LAST_COMPLETED_AT))

    def cycle_end_for(self, started_at: datetime) -> datetime:
        return add_days(started_at, self._config.submission_cycle_days)

    async def cycle_ends_at(self) -> datetime:
        """End of the current cycle; a cycle starting now when none is stored."""
        started_at = await self.cycle_started_at()
        return self.cycle_end_for(started_at if started_at is not None else self._clock())

    # ------------------------------------------------------------------
    # Cycle transitions
    # ------------------------------------------------------------------

    async def start_cycle(self, one_time_code: str) -> DiagnosedStatus:
        """Claim *one_time_code* and open a new submission cycle.

        Nothing is persisted unless the claim succeeds.

        Raises
        ------
        ExposureAuthenticationError
            If the backend rejects the code.
        """
        key_set = await self._backend.claim_one_time_code(one_time_code)
        await self._secure_storage.set_item(
            SUBMISSION_AUTH_KEYS,
            key_set.model_dump_json(by_alias=True),
            self._config.secure_options,
        )
        started_at = self._clock()
        await self._storage.set_item(SUBMISSION_CYCLE_STARTED_AT, str(to_epoch_ms(started_at)))
        _logger.info("Submission cycle started")
        return DiagnosedStatus(needs_submission=True, cycle_ends_at=self.cycle_end_for(started_at))

    async def restore(self) -> DiagnosedStatus | None:
        """Diagnosed status for a persisted cycle, if any.

        ``needs_submission`` is left ``False``; the next status update
        recomputes it.
        """
        started_at = await self.cycle_started_at()
        if started_at is None:
            return None
        return DiagnosedStatus(needs_submission=False, cycle_ends_at=self.cycle_end_for(started_at))

    async def calculate_needs_submission(self) -> bool:
        """Whether today's key upload is still owed.

        Day boundaries are calendar days in the configured time zone.
        """
        last_submitted = await self.last_completed_at()
        if last_submitted is None:
            return True

        cycle_ends_at = await self.cycle_ends_at()
        zone = self._config.zone
        if days_between(last_submitted, cycle_ends_at, zone) <= 0:
            # cycle over
            return False
        return days_between(last_submitted, self._clock(), zone) > 0

    # ------------------------------------------------------------------
    # Key upload
    # ------------------------------------------------------------------

    async def load_key_set(self) -> SubmissionKeySet:
        stored = await self._secure_storage.get_item(SUBMISSION_AUTH_KEYS, self._config.secure_options)
        if not stored:
            raise NoSubmissionKeysError("No submission keys found; the one-time code has not been claimed yet")
        try:
            return SubmissionKeySet.model_validate_json(stored)
        except ValidationError as exc:
            raise NoSubmissionKeysError("Stored submission keys are unreadable; claim a new one-time code") from exc

    async def submit_keys(self) -> int:
        """Upload this device's key history; returns the number of keys sent."""
        key_set = await self.load_key_set()
        keys = await self._bridge.get_temporary_exposure_key_history()
        await self._backend.report_diagnosis_keys(key_set, keys)
        _logger.info("Uploaded %d temporary exposure key(s)", len(keys))
        return len(keys)

    async def record_submission(self) -> None:
        await self._storage.set_item(SUBMISSION_LAST_COMPLETED_AT, str(to_epoch_ms(self._clock())))
