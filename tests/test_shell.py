"""Tests for the interactive addon shell."""

import io

import pytest
from conftest import FakeCollectionClient
from rich.console import Console

from addon_manager_cli.collection.store import CollectionStore
from addon_manager_cli.collection.sync import SessionContext
from addon_manager_cli.collection.sync import SyncController
from addon_manager_cli.commands.shell import AddonShell
from addon_manager_cli.commands.shell import run_shell
from addon_manager_cli.exceptions import RemoteRejectedError
from addon_manager_cli.ui.display import CollectionDisplay


class ScriptedPrompt:
    """Feeds prepared lines to run_shell, then signals EOF."""

    def __init__(self, lines: list[str]):
        self.lines = list(lines)

    async def prompt_async(self) -> str:
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


@pytest.fixture
def buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def shell(fake_client, buffer) -> AddonShell:
    display = CollectionDisplay(Console(file=buffer, width=120, color_system=None))
    context = SessionContext(
        get_auth_token=lambda: "auth-key",
        render=display.render,
        notify_error=display.notify_error,
        notify_success=display.notify_success,
    )
    return AddonShell(SyncController(context, CollectionStore(), fake_client), display)


def _names(shell: AddonShell) -> list[str]:
    return [entry.manifest.name for entry in shell.store.snapshot()]


@pytest.mark.asyncio
async def test_edits_accumulate_until_sync(shell, fake_client):
    await shell.dispatch("load")
    await shell.dispatch("move 0 2")
    await shell.dispatch('edit org.example.streams name="My Streams" description=Mine')
    await shell.dispatch("catalog 2 1 Popular Series")

    assert fake_client.replace_calls == []
    assert shell.dirty

    await shell.dispatch("sync")

    _, payload = fake_client.replace_calls[0]
    assert [item["manifest"]["name"] for item in payload] == ["OpenSubtitles", "My Streams", "Cinemeta"]
    assert payload[1]["manifest"]["description"] == "Mine"
    assert payload[2]["manifest"]["catalogs"][1]["name"] == "Popular Series"
    assert shell.dirty is False
    # Reloaded after sync
    assert len(fake_client.fetch_calls) == 2


@pytest.mark.asyncio
async def test_remove_protected_needs_force(shell, buffer):
    await shell.dispatch("load")

    await shell.dispatch("remove 0")
    assert len(shell.store) == 3
    assert "protected" in buffer.getvalue()

    await shell.dispatch("rm 0 --force")
    assert _names(shell) == ["OpenSubtitles", "Streams"]


@pytest.mark.asyncio
async def test_bad_index_reports_and_continues(shell, buffer):
    await shell.dispatch("load")

    assert await shell.dispatch("move 0 7") is True

    assert "out of range" in buffer.getvalue()
    assert shell.dirty is False


@pytest.mark.asyncio
async def test_usage_errors(shell, buffer):
    await shell.dispatch("load")

    await shell.dispatch("edit 0 colour=red")
    await shell.dispatch("move 0")
    await shell.dispatch("frobnicate")

    output = buffer.getvalue()
    assert "Expected FIELD=VALUE" in output
    assert "Usage: move TARGET POSITION" in output
    assert "Unknown command 'frobnicate'" in output


@pytest.mark.asyncio
async def test_sync_failure_keeps_edits(shell, fake_client, buffer):
    await shell.dispatch("load")
    await shell.dispatch("move 1 0")
    fake_client.replace_error = RemoteRejectedError("quota exceeded")

    await shell.dispatch("sync")

    assert shell.dirty
    assert _names(shell) == ["OpenSubtitles", "Cinemeta", "Streams"]
    assert "quota exceeded" in buffer.getvalue()


@pytest.mark.asyncio
async def test_quit_ends_session(shell):
    assert await shell.dispatch("quit") is False
    assert await shell.dispatch("") is True


@pytest.mark.asyncio
async def test_run_shell_loads_then_dispatches(shell, fake_client, buffer):
    await run_shell(shell, ScriptedPrompt(["move 0 1", "quit"]))

    assert fake_client.fetch_calls == ["auth-key"]
    assert _names(shell) == ["OpenSubtitles", "Cinemeta", "Streams"]
    assert "Unsynced edits were discarded" in buffer.getvalue()


@pytest.mark.asyncio
async def test_run_shell_survives_failed_initial_load(shell, fake_client, buffer):
    fake_client.fetch_error = RemoteRejectedError("session expired")

    await run_shell(shell, ScriptedPrompt(["list"]))

    output = buffer.getvalue()
    assert "session expired" in output
    assert "No addons in collection." in output
