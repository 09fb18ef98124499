"""Key/value persistence used by the service.

Two stores are involved: a plain one for timestamps and a secure one
(keychain / encrypted shared preferences on a device) for the
submission key pair. Both are structural protocols so platform stores
and test doubles can be passed in; in-memory and JSON-file
implementations are provided.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Protocol

from pyexposure._constants import KEYCHAIN_SERVICE, SHARED_PREFERENCES_NAME
from pyexposure.exceptions import ExposureError
from pyexposure.models._base import ExposureBaseModel

_logger = logging.getLogger(__name__)


class SecureStorageOptions(ExposureBaseModel):
    """Platform options selecting the secure store namespace.

    Parameters
    ----------
    keychain_service : str
        Keychain service name (iOS-class platforms).
    shared_preferences_name : str
        Encrypted shared-preferences file name (Android-class platforms).
    """

    keychain_service: str = KEYCHAIN_SERVICE
    shared_preferences_name: str = SHARED_PREFERENCES_NAME


class PersistencyProvider(Protocol):
    async def set_item(self, key: str, value: str) -> None: ...

    async def get_item(self, key: str) -> str | None: ...


class SecurePersistencyProvider(Protocol):
    async def set_item(self, key: str, value: str, options: SecureStorageOptions) -> None: ...

    async def get_item(self, key: str, options: SecureStorageOptions) -> str | None: ...


class MemoryStorage:
    """Process-local plain store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)


class MemorySecureStorage:
    """Process-local secure store, namespaced by :class:`SecureStorageOptions`."""

    def __init__(self) -> None:
        self._items: dict[tuple[str, str, str], str] = {}

    @staticmethod
    def _key(key: str, options: SecureStorageOptions) -> tuple[str, str, str]:
        return (options.keychain_service, options.shared_preferences_name, key)

    async def set_item(self, key: str, value: str, options: SecureStorageOptions) -> None:
        self._items[self._key(key, options)] = value

    async def get_item(self, key: str, options: SecureStorageOptions) -> str | None:
        return self._items.get(self._key(key, options))


class JsonFileStorage:
    """Plain store persisted as a flat JSON object on disk.

    File I/O runs in a worker thread; writes replace the file atomically.
    A missing file reads as empty.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()
        self._items: dict[str, str] | None = None

    def _read(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ExposureError(f"Storage file {self._path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise ExposureError(f"Storage file {self._path} must contain a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _write(self, items: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, sort_keys=True), encoding="utf-8")
        os.replace(tmp, self._path)

    async def _load(self) -> dict[str, str]:
        if self._items is None:
            self._items = await asyncio.to_thread(self._read)
            _logger.debug("Loaded %d item(s) from %s", len(self._items), self._path)
        return self._items

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            items = dict(await self._load())
            items[key] = value
            await asyncio.to_thread(self._write, items)
            self._items = items

    async def get_item(self, key: str) -> str | None:
        async with self._lock:
            items = await self._load()
        return items.get(key)
