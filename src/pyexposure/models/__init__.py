"""Data models for exposure notification state and payloads."""

from pyexposure.models._base import ExposureBaseModel
from pyexposure.models.exposure import (
    ExposureConfiguration,
    ExposureInformation,
    ExposureSummary,
    TemporaryExposureKey,
)
from pyexposure.models.status import (
    DiagnosedStatus,
    ExposedStatus,
    ExposureStatus,
    MonitoringStatus,
    SystemStatus,
    parse_exposure_status,
)
from pyexposure.models.submission import SubmissionKeySet

__all__ = [
    "DiagnosedStatus",
    "ExposedStatus",
    "ExposureBaseModel",
    "ExposureConfiguration",
    "ExposureInformation",
    "ExposureStatus",
    "ExposureSummary",
    "MonitoringStatus",
    "SubmissionKeySet",
    "SystemStatus",
    "TemporaryExposureKey",
    "parse_exposure_status",
]
