"""Native exposure-notification capability: contract and adapters."""

from pyexposure.bridge.api import ExposureNotificationBridge
from pyexposure.bridge.archive import ArchiveUnpackingBridge, unpack_archive
from pyexposure.bridge.notifications import (
    DEFAULT_MESSAGES,
    LoggingNotificationPresenter,
    NotificationPresenter,
    Translate,
    default_translate,
)

__all__ = [
    "ArchiveUnpackingBridge",
    "DEFAULT_MESSAGES",
    "ExposureNotificationBridge",
    "LoggingNotificationPresenter",
    "NotificationPresenter",
    "Translate",
    "default_translate",
    "unpack_archive",
]
