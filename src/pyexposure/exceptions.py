"""Custom exception hierarchy for pyexposure."""

from __future__ import annotations


class ExposureError(Exception):
    """Base exception for all pyexposure errors."""


class ExposureConfigError(ExposureError):
    """Invalid or missing configuration."""


class ExposureCryptoError(ExposureError):
    """Key generation, sealing or HMAC failure."""


class ExposureBridgeError(ExposureError):
    """The native exposure-matching capability failed or was misused."""


class ExposureTransportError(ExposureError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ExposureApiError(ExposureError):
    """Backend answered, but with an application-level error."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class ExposureAuthenticationError(ExposureApiError):
    """One-time code rejected by the submission server."""


class NoSubmissionKeysError(ExposureError):
    """No submission key pair stored.

    Raised by key upload when no one-time code has been claimed yet (or
    the stored key pair is unreadable). The caller is expected to send
    the user back through the one-time code flow.
    """
