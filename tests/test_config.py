from __future__ import annotations

import pytest

from pyexposure.config import ExposureConfig
from pyexposure.exceptions import ExposureConfigError
from pyexposure.storage import SecureStorageOptions


def test_defaults() -> None:
    config = ExposureConfig()

    assert config.period_hours == 12
    assert config.periods_per_fetch == 2
    assert config.lookback_days == 14
    assert config.submission_cycle_days == 14
    assert config.secure_options == SecureStorageOptions(
        keychain_service="covidShieldKeychain",
        shared_preferences_name="covidShieldSharedPreferences",
    )


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXPOSURE_RETRIEVE_URL", "https://retrieve.example")
    monkeypatch.setenv("EXPOSURE_REGION", "999")
    monkeypatch.setenv("EXPOSURE_TIME_ZONE", "Europe/Amsterdam")
    monkeypatch.setenv("EXPOSURE_LOOKBACK_DAYS", "7")
    monkeypatch.setenv("EXPOSURE_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("EXPOSURE_TEST_MODE", "yes")
    monkeypatch.setenv("EXPOSURE_KEYCHAIN_SERVICE", "otherKeychain")

    config = ExposureConfig.from_env()

    assert config.retrieve_url == "https://retrieve.example"
    assert config.region == "999"
    assert config.time_zone == "Europe/Amsterdam"
    assert config.lookback_days == 7
    assert config.request_timeout == 2.5
    assert config.test_mode is True
    assert config.secure_options.keychain_service == "otherKeychain"
    assert config.secure_options.shared_preferences_name == "covidShieldSharedPreferences"


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXPOSURE_LOOKBACK_DAYS", "7")
    monkeypatch.setenv("EXPOSURE_REGION", "999")

    config = ExposureConfig.from_env(lookback_days=3, region="302", secure_options={"keychain_service": "k"})

    assert config.lookback_days == 3
    assert config.region == "302"
    assert config.secure_options.keychain_service == "k"


def test_non_numeric_env_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXPOSURE_PERIOD_HOURS", "twelve")

    with pytest.raises(ExposureConfigError):
        ExposureConfig.from_env()


def test_invalid_values_rejected() -> None:
    with pytest.raises(ExposureConfigError):
        ExposureConfig(periods_per_fetch=0)
    with pytest.raises(ExposureConfigError):
        ExposureConfig(time_zone="Mars/Olympus_Mons")
