from __future__ import annotations

from pathlib import Path

import pytest

from pyexposure.exceptions import ExposureError
from pyexposure.storage import JsonFileStorage, MemorySecureStorage, MemoryStorage, SecureStorageOptions


@pytest.mark.asyncio
async def test_memory_storage() -> None:
    storage = MemoryStorage({"a": "1"})

    await storage.set_item("b", "2")

    assert await storage.get_item("a") == "1"
    assert await storage.get_item("b") == "2"
    assert await storage.get_item("missing") is None


@pytest.mark.asyncio
async def test_secure_storage_is_namespaced_by_options() -> None:
    storage = MemorySecureStorage()
    default = SecureStorageOptions()
    other = SecureStorageOptions(keychain_service="otherKeychain")

    await storage.set_item("submissionAuthKeys", "secret", default)

    assert await storage.get_item("submissionAuthKeys", default) == "secret"
    assert await storage.get_item("submissionAuthKeys", other) is None


@pytest.mark.asyncio
async def test_json_file_storage_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "state" / "storage.json"
    first = JsonFileStorage(path)
    assert await first.get_item("lastCheckTimeStamp") is None

    await first.set_item("lastCheckTimeStamp", "1589872200000")
    await first.set_item("submissionCycleStartedAt", "1589846400000")

    second = JsonFileStorage(path)
    assert await second.get_item("lastCheckTimeStamp") == "1589872200000"
    assert await second.get_item("submissionCycleStartedAt") == "1589846400000"
    assert not path.with_suffix(".json.tmp").exists()


@pytest.mark.asyncio
async def test_json_file_storage_rejects_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[not json", encoding="utf-8")

    with pytest.raises(ExposureError):
        await JsonFileStorage(path).get_item("anything")
