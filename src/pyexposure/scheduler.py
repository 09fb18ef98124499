"""Periodic background trigger.

Stands in for the platform's background-fetch scheduler: the registered
task runs every ``interval`` seconds until :meth:`stop`. A failing run
is logged and the schedule continues.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from pyexposure.config import ExposureConfig

_logger = logging.getLogger(__name__)

PeriodicTask = Callable[[], Awaitable[None]]


class BackgroundScheduler:
    """Usage::

    scheduler = BackgroundScheduler.from_config(config)
    scheduler.register_periodic_task(service.update_exposure_status_in_background)
    """

    def __init__(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._task: PeriodicTask | None = None
        self._runner: asyncio.Task[None] | None = None

    @classmethod
    def from_config(cls, config: ExposureConfig) -> BackgroundScheduler:
        return cls(config.background_interval)

    @property
    def is_running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    def register_periodic_task(self, task: PeriodicTask) -> None:
        """Schedule *task*, replacing any previously registered one.

        Must be called with a running event loop.
        """
        self._cancel_runner()
        self._task = task
        self._runner = asyncio.get_running_loop().create_task(self._run())

    async def run_now(self) -> None:
        """Run the registered task once, outside the schedule."""
        if self._task is not None:
            await self._run_task(self._task)

    async def stop(self) -> None:
        runner = self._runner
        self._cancel_runner()
        if runner is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await runner

    def _cancel_runner(self) -> None:
        runner = self._runner
        self._runner = None
        if runner is not None and not runner.done():
            runner.cancel()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            task = self._task
            if task is not None:
                await self._run_task(task)

    @staticmethod
    async def _run_task(task: PeriodicTask) -> None:
        try:
            await task()
        except Exception:
            _logger.warning("Background task failed", exc_info=True)
