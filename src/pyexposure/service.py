"""Exposure notification service.

Reconciles persisted state, the native exposure-matching capability and
the diagnosis-key backend into two observable statuses for the UI:
the system status of the capability and the exposure status of the
user (monitoring, exposed or diagnosed).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pyexposure._constants import (
    DAILY_UPLOAD_BODY_KEY,
    DAILY_UPLOAD_TITLE_KEY,
    EXPOSED_BODY_KEY,
    EXPOSED_TITLE_KEY,
    LAST_CHECK_TIMESTAMP,
)
from pyexposure._dates import parse_epoch_ms, to_epoch_ms, utcnow
from pyexposure.backend.api import BackendInterface
from pyexposure.bridge.api import ExposureNotificationBridge
from pyexposure.bridge.notifications import (
    LoggingNotificationPresenter,
    NotificationPresenter,
    Translate,
    default_translate,
)
from pyexposure.config import ExposureConfig
from pyexposure.evaluator import ExposureEvaluator
from pyexposure.models.status import (
    DiagnosedStatus,
    ExposedStatus,
    ExposureStatus,
    MonitoringStatus,
    SystemStatus,
)
from pyexposure.observable import MutableObservable, Observable
from pyexposure.storage import PersistencyProvider, SecurePersistencyProvider
from pyexposure.submission import SubmissionCycleManager

_logger = logging.getLogger(__name__)


class ExposureNotificationService:
    """Single source of truth for exposure and submission status.

    Usage::

        service = ExposureNotificationService(backend, bridge, storage, secure_storage)
        service.exposure_status.observe(render)
        await service.start()

    Status updates are single-flight: a call made while another update
    is running returns immediately without touching the backend, the
    bridge or the statuses.
    """

    def __init__(
        self,
        backend: BackendInterface,
        bridge: ExposureNotificationBridge,
        storage: PersistencyProvider,
        secure_storage: SecurePersistencyProvider,
        *,
        config: ExposureConfig | None = None,
        translate: Translate = default_translate,
        notifier: NotificationPresenter | None = None,
        on_ready: Callable[[ExposureNotificationService], None] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._config = config or ExposureConfig()
        self._bridge = bridge
        self._storage = storage
        self._translate = translate
        self._notifier = notifier or LoggingNotificationPresenter()
        self._on_ready = on_ready
        self._clock = clock

        self._system_status: MutableObservable[SystemStatus] = MutableObservable(SystemStatus.DISABLED)
        self._exposure_status: MutableObservable[ExposureStatus] = MutableObservable(MonitoringStatus())

        self._evaluator = ExposureEvaluator(backend, bridge, self._config, clock=clock)
        self._submissions = SubmissionCycleManager(
            backend,
            bridge,
            storage,
            secure_storage,
            self._config,
            clock=clock,
        )

        self._is_starting = False
        self._is_updating_exposure_status = False
        self._ready_notified = False

    @property
    def system_status(self) -> Observable[SystemStatus]:
        return self._system_status

    @property
    def exposure_status(self) -> Observable[ExposureStatus]:
        return self._exposure_status

    @property
    def submissions(self) -> SubmissionCycleManager:
        return self._submissions

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start the capability, restore persisted state and run an update.

        If the native capability cannot start, the service stays as it is
        and no update runs. ``on_ready`` fires once, after the first attempt.
        """
        if self._is_starting:
            return
        self._is_starting = True
        try:
            await self._start()
        finally:
            self._is_starting = False
            self._notify_ready()

    async def _start(self) -> None:
        try:
            await self._bridge.start()
        except Exception:
            # Capability not available on this device.
            _logger.debug("Exposure notification capability failed to start", exc_info=True)
            return

        await self.update_system_status()

        restored = await self._submissions.restore()
        if restored is not None:
            self._exposure_status.set(restored)

        last_checked = await self._storage.get_item(LAST_CHECK_TIMESTAMP)
        if last_checked:
            self._exposure_status.set(self._exposure_status.get().model_copy(update={"last_checked": last_checked}))

        await self.update_exposure_status()

    def _notify_ready(self) -> None:
        if self._ready_notified or self._on_ready is None:
            return
        self._ready_notified = True
        try:
            self._on_ready(self)
        except Exception:
            _logger.debug("on_ready callback failed", exc_info=True)

    async def on_foreground(self) -> None:
        """Refresh both statuses when the app returns to the foreground."""
        await self.update_system_status()
        await self.update_exposure_status()

    # ------------------------------------------------------------------
    # Status updates
    # ------------------------------------------------------------------

    async def update_system_status(self) -> SystemStatus:
        try:
            status = SystemStatus(await self._bridge.get_status())
        except Exception:
            _logger.debug("Reading exposure notification status failed", exc_info=True)
            status = SystemStatus.DISABLED
        self._system_status.set(status)
        return status

    async def update_exposure_status(self) -> None:
        """Run one status update unless one is already in flight.

        Errors from the backend or the bridge propagate; the in-flight
        guard is released either way.
        """
        if self._system_status.get() != SystemStatus.ACTIVE:
            return
        if self._is_updating_exposure_status:
            _logger.debug("Exposure status update already in flight")
            return
        self._is_updating_exposure_status = True
        try:
            await self._perform_exposure_status_update()
        finally:
            self._is_updating_exposure_status = False

    async def update_exposure_status_in_background(self) -> None:
        """Update, then raise a local notification if the user must act.

        Runs for every background wake; an unchanged status is notified
        again on the next wake.
        """
        if self._system_status.get() != SystemStatus.ACTIVE:
            return
        await self.update_exposure_status()
        status = self._exposure_status.get()
        if isinstance(status, ExposedStatus):
            self._present(EXPOSED_TITLE_KEY, EXPOSED_BODY_KEY)
        elif isinstance(status, DiagnosedStatus) and status.needs_submission:
            self._present(DAILY_UPLOAD_TITLE_KEY, DAILY_UPLOAD_BODY_KEY)

    def _present(self, title_key: str, body_key: str) -> None:
        self._notifier.present_local_notification(
            title=self._translate(title_key),
            body=self._translate(body_key),
        )

    async def _perform_exposure_status_update(self) -> ExposureStatus:
        current = self._exposure_status.get()
        if isinstance(current, DiagnosedStatus):
            # Diagnosed users are not scanned for new exposures.
            needs_submission = await self._submissions.calculate_needs_submission()
            return await self._finalize(
                current.model_copy(update={"needs_submission": needs_submission}),
                started_from=current,
            )

        last_checked = parse_epoch_ms(await self._storage.get_item(LAST_CHECK_TIMESTAMP))
        result = await self._evaluator.evaluate(last_checked)
        if isinstance(result, MonitoringStatus) and isinstance(current, ExposedStatus):
            # Exposed sticks until reset from outside this service.
            result = current
        return await self._finalize(result, started_from=current)

    async def _finalize(self, status: ExposureStatus, *, started_from: ExposureStatus) -> ExposureStatus:
        timestamp = to_epoch_ms(self._clock())
        previous = parse_epoch_ms(self._exposure_status.get().last_checked)
        if previous is not None:
            timestamp = max(timestamp, to_epoch_ms(previous))
        last_checked = str(timestamp)
        await self._storage.set_item(LAST_CHECK_TIMESTAMP, last_checked)

        latest = self._exposure_status.get()
        if latest is not started_from and isinstance(latest, DiagnosedStatus):
            # A claim or upload landed while this update ran; keep it over the stale result.
            _logger.debug("Exposure status changed during update; keeping %s", latest.type)
            status = latest
        final = status.model_copy(update={"last_checked": last_checked})
        if final.type != latest.type:
            _logger.info("Exposure status changed to %s", final.type)
        self._exposure_status.set(final)
        return final

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def start_keys_submission(self, one_time_code: str) -> None:
        """Claim *one_time_code* and enter the diagnosed state.

        Raises
        ------
        ExposureAuthenticationError
            If the backend rejects the code; no state changes in that case.
        """
        status = await self._submissions.start_cycle(one_time_code)
        last_checked = self._exposure_status.get().last_checked
        self._exposure_status.set(status.model_copy(update={"last_checked": last_checked}))

    async def fetch_and_submit_keys(self) -> None:
        """Upload today's keys and mark the daily submission as done.

        Raises
        ------
        NoSubmissionKeysError
            If no one-time code has been claimed.
        """
        await self._submissions.submit_keys()
        if not isinstance(self._exposure_status.get(), DiagnosedStatus):
            return
        await self._submissions.record_submission()
        current = self._exposure_status.get()
        if not isinstance(current, DiagnosedStatus):
            return
        self._exposure_status.set(current.model_copy(update={"needs_submission": False}))
