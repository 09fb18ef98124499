"""Local notifications raised after background status updates."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from pyexposure._constants import (
    DAILY_UPLOAD_BODY_KEY,
    DAILY_UPLOAD_TITLE_KEY,
    EXPOSED_BODY_KEY,
    EXPOSED_TITLE_KEY,
)

_logger = logging.getLogger(__name__)

Translate = Callable[[str], str]

DEFAULT_MESSAGES: dict[str, str] = {
    EXPOSED_TITLE_KEY: "You have possibly been exposed to COVID-19",
    EXPOSED_BODY_KEY: "Open the app to find out what to do next.",
    DAILY_UPLOAD_TITLE_KEY: "Share your random IDs today",
    DAILY_UPLOAD_BODY_KEY: "Open the app to upload your random IDs for the day.",
}


def default_translate(key: str) -> str:
    """English texts; unknown keys are returned unchanged."""
    return DEFAULT_MESSAGES.get(key, key)


class NotificationPresenter(Protocol):
    def present_local_notification(self, *, title: str, body: str) -> None: ...


class LoggingNotificationPresenter:
    """Presenter for hosts without a notification center: logs at INFO."""

    def present_local_notification(self, *, title: str, body: str) -> None:
        _logger.info("Local notification: %s - %s", title, body)
