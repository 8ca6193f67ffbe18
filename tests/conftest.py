"""Pytest configuration for Addon Manager CLI tests."""

import asyncio
import copy
from collections.abc import Sequence

import pytest

from addon_manager_cli.exceptions import RemoteRejectedError
from addon_manager_cli.models import AddonEntry

SAMPLE_ADDONS = [
    {
        "transportUrl": "https://v3-cinemeta.strem.io/manifest.json",
        "transportName": "http",
        "manifest": {
            "id": "com.linvo.cinemeta",
            "version": "3.0.13",
            "name": "Cinemeta",
            "description": "The official addon for movie and series catalogs",
            "logo": "https://v3-cinemeta.strem.io/logo.png",
            "resources": ["catalog", "meta", "addon_catalog"],
            "types": ["movie", "series"],
            "idPrefixes": ["tt"],
            "catalogs": [
                {"type": "movie", "id": "top", "name": "Popular", "extra": [{"name": "genre", "options": ["Action"]}]},
                {"type": "series", "id": "top", "name": "Popular"},
            ],
            "behaviorHints": {"newEpisodeNotifications": True},
        },
        "flags": {"official": True, "protected": True},
    },
    {
        "transportUrl": "https://opensubtitles.strem.io/manifest.json",
        "transportName": "http",
        "manifest": {
            "id": "org.stremio.opensubtitles",
            "version": "0.24.0",
            "name": "OpenSubtitles",
            "resources": ["subtitles"],
            "types": ["movie", "series"],
            "catalogs": [],
        },
        "flags": {"official": True},
    },
    {
        "transportUrl": "https://streams.example.org/manifest.json",
        "transportName": "",
        "manifest": {
            "id": "org.example.streams",
            "version": "1.2.0",
            "name": "Streams",
            "description": "Community streams",
            "background": "https://streams.example.org/bg.jpg",
            "catalogs": [{"type": "movie", "id": "trending", "name": "Trending"}],
            "config": [{"key": "token", "type": "text", "required": True}],
        },
    },
]


class FakeCollectionClient:
    """In-memory stand-in for RemoteCollectionClient.

    Set ``fetch_error`` / ``replace_error`` to make the next calls fail, or
    ``gate`` to hold calls open until the test sets it.
    """

    def __init__(self, addons: list[dict] | None = None):
        self.addons = copy.deepcopy(SAMPLE_ADDONS if addons is None else addons)
        self.fetch_calls: list[str] = []
        self.replace_calls: list[tuple[str, list[dict]]] = []
        self.fetch_error: Exception | None = None
        self.replace_error: Exception | None = None
        self.gate: asyncio.Event | None = None

    async def fetch_collection(self, auth_key: str) -> list[AddonEntry]:
        self.fetch_calls.append(auth_key)
        if self.gate is not None:
            await self.gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return [AddonEntry.from_wire(item) for item in self.addons]

    async def replace_collection(self, auth_key: str, entries: Sequence[AddonEntry]) -> None:
        payload = [entry.to_wire() for entry in entries]
        self.replace_calls.append((auth_key, payload))
        if self.gate is not None:
            await self.gate.wait()
        if self.replace_error is not None:
            raise self.replace_error
        self.addons = copy.deepcopy(payload)


@pytest.fixture
def addons_payload() -> list[dict]:
    """Fresh copy of the sample server payload."""
    return copy.deepcopy(SAMPLE_ADDONS)


@pytest.fixture
def fake_client() -> FakeCollectionClient:
    return FakeCollectionClient()


@pytest.fixture
def rejecting_client() -> FakeCollectionClient:
    client = FakeCollectionClient()
    client.replace_error = RemoteRejectedError("quota exceeded")
    return client


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep settings, history and logs out of the real home directory."""
    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()

    monkeypatch.setenv("HOME", home.as_posix())
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("ADDON_MANAGER_AUTH_KEY", raising=False)
    monkeypatch.delenv("ADDON_MANAGER_API_URL", raising=False)
    monkeypatch.setattr("addon_manager_cli.logging_setup.DEFAULT_PATH", str(tmp_path / "logs" / "test.log.jsonl"))
    return home
