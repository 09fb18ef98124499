"""X25519 key pairs and sealed upload payloads.

The submission server and the device each hold an X25519 key pair. An
upload is sealed with AES-256-GCM under a key derived (HKDF-SHA256) from
the X25519 shared secret, so either side can open it with its own
private key and the peer's public key.
"""

from __future__ import annotations

import base64
import binascii
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from pyexposure.exceptions import ExposureCryptoError

_NONCE_BYTES = 12
_HKDF_INFO = b"pyexposure-upload-v1"


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(value: str, *, name: str, nbytes: int | None = None) -> bytes:
    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ExposureCryptoError(f"{name} must be base64-encoded") from exc
    if nbytes is not None and len(data) != nbytes:
        raise ExposureCryptoError(f"{name} must be {nbytes} bytes (got {len(data)})")
    return data


def generate_key_pair() -> tuple[str, str]:
    """Generate an X25519 key pair.

    Returns
    -------
    tuple[str, str]
        ``(private_key, public_key)``, both raw 32-byte keys in base64.
    """
    private = X25519PrivateKey.generate()
    private_raw = private.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_raw = private.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return _b64(private_raw), _b64(public_raw)


def _shared_key(private_key: str, peer_public_key: str) -> bytes:
    private = X25519PrivateKey.from_private_bytes(_unb64(private_key, name="private key", nbytes=32))
    peer = X25519PublicKey.from_public_bytes(_unb64(peer_public_key, name="public key", nbytes=32))
    shared = private.exchange(peer)
    return HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=_HKDF_INFO).derive(shared)


def seal(plaintext: bytes, *, private_key: str, peer_public_key: str) -> tuple[str, str]:
    """Encrypt *plaintext* for the holder of *peer_public_key*.

    Returns
    -------
    tuple[str, str]
        ``(nonce, ciphertext)`` in base64.
    """
    key = _shared_key(private_key, peer_public_key)
    nonce = secrets.token_bytes(_NONCE_BYTES)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext, None)
    return _b64(nonce), _b64(ciphertext)


def open_sealed(ciphertext: str, nonce: str, *, private_key: str, peer_public_key: str) -> bytes:
    """Decrypt a payload produced by :func:`seal` on the other side.

    This is the receiving half of a key upload: a submission server (or
    a test harness standing in for one) opens the ``payload``/``nonce``
    pair with its own private key and the uploader's ``appPublicKey``.

    Raises
    ------
    ExposureCryptoError
        If a key or the nonce is malformed, or the payload fails
        authentication.
    """
    key = _shared_key(private_key, peer_public_key)
    try:
        return AESGCM(key).decrypt(
            _unb64(nonce, name="nonce", nbytes=_NONCE_BYTES),
            _unb64(ciphertext, name="ciphertext"),
            None,
        )
    except InvalidTag as exc:
        raise ExposureCryptoError("Sealed payload failed authentication") from exc
