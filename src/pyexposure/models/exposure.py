"""Exposure-matching payloads exchanged with the native capability."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from pyexposure.models._base import ExposureBaseModel

_DEFAULT_LEVEL_VALUES = (1, 2, 3, 4, 5, 6, 7, 8)


class ExposureConfiguration(ExposureBaseModel):
    """Risk-scoring parameters handed to exposure detection.

    Served by the backend; the defaults are the values used in test mode.
    """

    minimum_risk_score: int = 0
    attenuation_level_values: list[int] = Field(default_factory=lambda: list(_DEFAULT_LEVEL_VALUES))
    attenuation_weight: int = 50
    days_since_last_exposure_level_values: list[int] = Field(default_factory=lambda: list(_DEFAULT_LEVEL_VALUES))
    days_since_last_exposure_weight: int = 50
    duration_level_values: list[int] = Field(default_factory=lambda: list(_DEFAULT_LEVEL_VALUES))
    duration_weight: int = 50
    transmission_risk_level_values: list[int] = Field(default_factory=lambda: list(_DEFAULT_LEVEL_VALUES))
    transmission_risk_weight: int = 50


class ExposureSummary(ExposureBaseModel):
    """Result of one detection pass.

    Platform-specific fields are kept (``extra="allow"``) because the
    summary is handed back verbatim to fetch exposure details.
    """

    model_config = ConfigDict(extra="allow")

    days_since_last_exposure: int = 0
    matched_key_count: int = 0
    maximum_risk_score: int = 0


class ExposureInformation(ExposureBaseModel):
    """A single detected exposure."""

    date_received: int
    """Epoch milliseconds of the exposure day."""
    duration: int = 0
    """Minutes of contact, bucketed by the platform."""
    attenuation_value: int = 0
    total_risk_score: int = 0
    transmission_risk_level: int = 0


class TemporaryExposureKey(ExposureBaseModel):
    """One of this device's own rolling keys, as uploaded after diagnosis."""

    key_data: str
    rolling_start_number: int
    rolling_period: int = 144
    transmission_risk_level: int = 0
