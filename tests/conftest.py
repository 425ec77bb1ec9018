"""Shared fixtures for the modloom tests."""

import os

import pytest

from modloom.client import ModioClient
from modloom.config import ModioSettings, get_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep MODLOOM_* variables of the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.upper().startswith("MODLOOM_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> ModioSettings:
    return ModioSettings(_env_file=None)


@pytest.fixture
def client(settings) -> ModioClient:
    """A client with an API key only."""
    return ModioClient(settings, api_key="test-key")


@pytest.fixture
def token_client(settings) -> ModioClient:
    """A client with both an API key and a token."""
    return ModioClient(settings, api_key="test-key", token="test-token")


@pytest.fixture
def file_json():
    """Factory for the JSON of a modfile."""

    def make(file_id: int = 1, mod_id: int = 19, version: str | None = "1.0", **extra):
        data = {
            "id": file_id,
            "mod_id": mod_id,
            "date_added": 1_600_000_000 + file_id,
            "filesize": 11,
            "filesize_uncompressed": 42,
            "filehash": {"md5": "5eb63bbbe01eeed093cb22bb8f5acdc3"},
            "filename": f"file-{file_id}.zip",
            "version": version,
            "download": {
                "binary_url": f"https://files.example.com/{file_id}.zip?sig=abc",
                "date_expires": 1_700_000_000,
            },
        }
        data.update(extra)
        return data

    return make


@pytest.fixture
def mod_json(file_json):
    """Factory for the JSON of a mod profile."""

    def make(mod_id: int = 19, game_id: int = 5, modfile: dict | None = None, **extra):
        data = {
            "id": mod_id,
            "game_id": game_id,
            "name": f"Mod {mod_id}",
            "name_id": f"mod-{mod_id}",
            "submitted_by": {"id": 1, "name_id": "alice", "username": "alice", "avatar": {}},
            "modfile": file_json(mod_id=mod_id) if modfile is None else modfile,
        }
        data.update(extra)
        return data

    return make


@pytest.fixture
def list_json():
    """Factory for the paginated list envelope."""

    def make(data: list, total: int | None = None, offset: int = 0, limit: int = 100):
        return {
            "data": data,
            "result_count": len(data),
            "result_offset": offset,
            "result_limit": limit,
            "result_total": len(data) if total is None else total,
        }

    return make
