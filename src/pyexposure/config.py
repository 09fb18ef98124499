"""Client configuration for pyexposure."""

from __future__ import annotations

import dataclasses
import os
import tempfile
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pyexposure._constants import (
    LOOKBACK_DAYS,
    PERIOD_HOURS,
    PERIODS_PER_FETCH,
    RETRIEVE_URL,
    SUBMISSION_CYCLE_DAYS,
    SUBMIT_URL,
)
from pyexposure.exceptions import ExposureConfigError
from pyexposure.storage import SecureStorageOptions


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _default_cache_dir() -> str:
    return os.path.join(tempfile.gettempdir(), "pyexposure")


@dataclasses.dataclass(frozen=True)
class ExposureConfig:
    """Client configuration.

    Parameters
    ----------
    retrieve_url : str
        Base URL of the diagnosis-key retrieval server.
    submit_url : str
        Base URL of the key submission server.
    hmac_key : str
        Hex-encoded key used to sign retrieval URLs.
    region : str
        Region code selecting configuration and key archives.
    time_zone : str
        IANA time zone that defines calendar days for the daily upload.
    period_hours : int
        Length of one diagnosis-key period.
    periods_per_fetch : int
        Periods covered by a single archive fetch.
    lookback_days : int
        Backfill window when there is no (or a too old) last check.
    submission_cycle_days : int
        Length of the post-diagnosis upload cycle.
    cache_dir : str
        Directory where downloaded key archives are written.
    request_timeout : float
        Total timeout in seconds for each backend request.
    background_interval : float
        Seconds between background status updates.
    test_mode : bool
        Use the built-in mock backend instead of the HTTP one.
    secure_options : SecureStorageOptions
        Namespace for the secure store.
    """

    retrieve_url: str = RETRIEVE_URL
    submit_url: str = SUBMIT_URL
    hmac_key: str = ""
    region: str = "302"
    time_zone: str = "UTC"
    period_hours: int = PERIOD_HOURS
    periods_per_fetch: int = PERIODS_PER_FETCH
    lookback_days: int = LOOKBACK_DAYS
    submission_cycle_days: int = SUBMISSION_CYCLE_DAYS
    cache_dir: str = dataclasses.field(default_factory=_default_cache_dir)
    request_timeout: float = 30.0
    background_interval: float = 4 * 3600
    test_mode: bool = False
    secure_options: SecureStorageOptions = dataclasses.field(default_factory=SecureStorageOptions)

    def __post_init__(self) -> None:
        for name in ("period_hours", "periods_per_fetch", "lookback_days", "submission_cycle_days"):
            if getattr(self, name) <= 0:
                raise ExposureConfigError(f"{name} must be positive, got {getattr(self, name)}")
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ExposureConfigError(f"Unknown time zone {self.time_zone!r}") from exc

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone)

    @classmethod
    def from_env(cls, **overrides: Any) -> ExposureConfig:
        """Create configuration from ``EXPOSURE_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        ExposureConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "EXPOSURE_RETRIEVE_URL": "retrieve_url",
            "EXPOSURE_SUBMIT_URL": "submit_url",
            "EXPOSURE_HMAC_KEY": "hmac_key",
            "EXPOSURE_REGION": "region",
            "EXPOSURE_TIME_ZONE": "time_zone",
            "EXPOSURE_CACHE_DIR": "cache_dir",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "EXPOSURE_PERIOD_HOURS": ("period_hours", int),
            "EXPOSURE_PERIODS_PER_FETCH": ("periods_per_fetch", int),
            "EXPOSURE_LOOKBACK_DAYS": ("lookback_days", int),
            "EXPOSURE_SUBMISSION_CYCLE_DAYS": ("submission_cycle_days", int),
            "EXPOSURE_REQUEST_TIMEOUT": ("request_timeout", float),
            "EXPOSURE_BACKGROUND_INTERVAL": ("background_interval", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = cast(val)
            except ValueError as exc:
                raise ExposureConfigError(f"{env_key} must be numeric, got {val!r}") from exc

        if "test_mode" not in overrides:
            config_kwargs["test_mode"] = _env_bool(env.get("EXPOSURE_TEST_MODE"), False)

        # Allow overriding secure options via a nested dict
        secure_overrides = overrides.pop("secure_options", None)
        secure_kwargs: dict[str, str] = {}
        keychain = env.get("EXPOSURE_KEYCHAIN_SERVICE")
        if keychain is not None:
            secure_kwargs["keychain_service"] = keychain
        prefs = env.get("EXPOSURE_SHARED_PREFERENCES_NAME")
        if prefs is not None:
            secure_kwargs["shared_preferences_name"] = prefs
        if isinstance(secure_overrides, dict):
            secure_kwargs.update(secure_overrides)
        elif isinstance(secure_overrides, SecureStorageOptions):
            secure_kwargs = secure_overrides.model_dump()
        if secure_kwargs:
            config_kwargs["secure_options"] = SecureStorageOptions(**secure_kwargs)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
