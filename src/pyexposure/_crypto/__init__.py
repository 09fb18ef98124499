"""Cryptographic primitives for the submission and retrieval servers."""

from __future__ import annotations

from pyexposure._crypto.hashing import retrieve_signature
from pyexposure._crypto.keys import generate_key_pair, open_sealed, seal

__all__ = [
    "generate_key_pair",
    "open_sealed",
    "retrieve_signature",
    "seal",
]
