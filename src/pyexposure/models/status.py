"""System and exposure status models published by the service."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from pyexposure.models._base import ExposureBaseModel
from pyexposure.models.exposure import ExposureInformation


class SystemStatus(enum.StrEnum):
    """State of the native exposure-notification capability.

    Native values are matched case-insensitively, ignoring underscores
    (``"BluetoothOff"`` resolves to ``BLUETOOTH_OFF``). Anything else
    resolves to ``UNKNOWN``.
    """

    UNKNOWN = "unknown"
    DISABLED = "disabled"
    RESTRICTED = "restricted"
    BLUETOOTH_OFF = "bluetooth_off"
    ACTIVE = "active"

    @classmethod
    def _missing_(cls, value: object) -> SystemStatus:
        if isinstance(value, str):
            wanted = value.strip().lower().replace("_", "")
            for member in cls:
                if member.value.replace("_", "") == wanted:
                    return member
        return cls.UNKNOWN


class MonitoringStatus(ExposureBaseModel):
    """No known exposure and no diagnosis."""

    type: Literal["monitoring"] = "monitoring"
    last_checked: str | None = None


class ExposedStatus(ExposureBaseModel):
    """A diagnosis key matched one of the keys this device observed."""

    type: Literal["exposed"] = "exposed"
    exposures: list[ExposureInformation] = Field(default_factory=list)
    last_checked: str | None = None


class DiagnosedStatus(ExposureBaseModel):
    """The user confirmed a positive diagnosis and uploads keys daily."""

    type: Literal["diagnosed"] = "diagnosed"
    needs_submission: bool
    cycle_ends_at: datetime
    last_checked: str | None = None


ExposureStatus = Annotated[
    MonitoringStatus | ExposedStatus | DiagnosedStatus,
    Field(discriminator="type"),
]

_EXPOSURE_STATUS_ADAPTER: TypeAdapter[ExposureStatus] = TypeAdapter(ExposureStatus)


def parse_exposure_status(data: object) -> MonitoringStatus | ExposedStatus | DiagnosedStatus:
    """Validate a dict (wire or python names) into the matching status model.

    The inverse of ``status.to_wire()``: use it to rebuild a status that
    was handed to another process or cached by a UI layer.
    """
    return _EXPOSURE_STATUS_ADAPTER.validate_python(data)
