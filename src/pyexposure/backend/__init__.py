"""Diagnosis-key backend: contract, HTTP client and test-mode mock."""

from __future__ import annotations

from pyexposure.backend.api import BackendInterface
from pyexposure.backend.http import BackendService
from pyexposure.backend.mock import MockBackend
from pyexposure.config import ExposureConfig


def create_backend(config: ExposureConfig) -> BackendService | MockBackend:
    """Pick the backend for *config*: the mock in test mode, HTTP otherwise."""
    if config.test_mode:
        return MockBackend(config)
    return BackendService(config)


__all__ = [
    "BackendInterface",
    "BackendService",
    "MockBackend",
    "create_backend",
]
