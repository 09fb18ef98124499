"""Masking of secrets in debug log output.

Backend traffic carries one-time codes, private keys, retrieval HMACs,
the device's own exposure keys and sealed upload blobs. Payloads pass
through :func:`redact_for_log` before they reach a DEBUG log line.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

_MAX_DEPTH = 20

# Compared after dropping case and separators: ``key_data``, ``keyData``
# and ``key-data`` all normalize to ``keydata``.
_SECRET_KEYS: frozenset[str] = frozenset(
    {
        "onetimecode",
        "clientprivatekey",
        "hmac",
        "hmackey",
        "authorization",
        "keydata",
        "payload",
        "nonce",
    }
)
_SEPARATORS = re.compile(r"[^0-9a-z]")


def _is_secret(key: object) -> bool:
    return _SEPARATORS.sub("", str(key).lower()) in _SECRET_KEYS


def _mask(value: Any) -> str:
    if isinstance(value, str | bytes):
        return f"<redacted:{len(value)}>"
    return "<redacted>"


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of *value* with secret fields masked.

    Mappings and pydantic models (by their wire names) are walked
    recursively; secret values become ``<redacted:N>`` where ``N`` is the
    original length. Long strings are cut at *max_string* characters.
    """

    def walk(item: Any, depth: int) -> Any:
        if depth > _MAX_DEPTH:
            return "<max-depth>"
        if item is None or isinstance(item, bool | int | float):
            return item
        if isinstance(item, str):
            return item if len(item) <= max_string else f"{item[:max_string]}…<truncated>"
        if isinstance(item, bytes):
            return f"<bytes:{len(item)}b>"
        if isinstance(item, BaseModel):
            item = item.model_dump(by_alias=True, mode="json")
        if isinstance(item, Mapping):
            return {str(k): _mask(v) if _is_secret(k) else walk(v, depth + 1) for k, v in item.items()}
        if isinstance(item, list | tuple):
            return [walk(v, depth + 1) for v in item]
        return repr(item)

    return walk(value, 0)
