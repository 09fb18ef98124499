"""HMAC signing of diagnosis-key retrieval URLs."""

from __future__ import annotations

import hashlib
import hmac

from pyexposure.exceptions import ExposureCryptoError


def retrieve_signature(hmac_key_hex: str, region: str, period: int, hour: int) -> str:
    """Sign a retrieval request.

    The message is ``"{region}:{period}:{hour}"`` where *hour* is the
    current hour since the epoch, so a signed URL is only valid briefly.

    Returns
    -------
    str
        Lowercase hex HMAC-SHA256 digest.
    """
    try:
        key = bytes.fromhex(hmac_key_hex.strip())
    except ValueError as exc:
        raise ExposureCryptoError("HMAC key must be hex-encoded") from exc
    if not key:
        raise ExposureCryptoError("HMAC key is empty")
    message = f"{region}:{period}:{hour}".encode()
    return hmac.new(key, message, hashlib.sha256).hexdigest()
