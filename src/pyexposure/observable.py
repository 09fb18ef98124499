"""Observable value cells.

The service publishes its two statuses through these cells. Observers
are called synchronously, in subscription order, on every ``set``. A
late subscriber does not receive earlier values; it reads the current
one with ``get``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class Observable(Generic[T]):
    """Read-only view: current value plus change subscription."""

    def __init__(self, value: T) -> None:
        self._value = value
        self._observers: dict[int, Callable[[T], None]] = {}
        self._next_id = 0

    def get(self) -> T:
        return self._value

    def observe(self, observer: Callable[[T], None]) -> Callable[[], None]:
        """Subscribe *observer*; returns a function that unsubscribes it."""
        observer_id = self._next_id
        self._next_id += 1
        self._observers[observer_id] = observer

        def _unsubscribe() -> None:
            self._observers.pop(observer_id, None)

        return _unsubscribe


class MutableObservable(Observable[T]):
    """Observable cell that can be written."""

    def set(self, value: T) -> None:
        self._value = value
        # Snapshot: observers may subscribe, unsubscribe or set() while notified.
        for observer in list(self._observers.values()):
            try:
                observer(value)
            except Exception:
                _logger.debug("Status observer failed", exc_info=True)
