"""Interactive editing session.

Loads the collection once, accepts any number of local edits and syncs
only when asked. After a successful sync the collection is reloaded so the
view matches what the server now holds.
"""

import asyncio
import logging
import shlex
from pathlib import Path

import click
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from prompt_toolkit.history import InMemoryHistory

from ..collection import SyncController
from ..console import console
from ..exceptions import AddonManagerError
from ..exceptions import CollectionError
from ..session import create_controller
from ..session import resolve_target
from ..ui.display import CollectionDisplay
from ..utils.error_format import format_error_message

logger = logging.getLogger(__name__)

SHELL_HELP = """\
Commands:
  list                              Show the local collection
  show TARGET                       Show one addon's editable fields
  move TARGET POSITION              Move an addon (remove, then insert at POSITION)
  remove TARGET [--force]           Remove an addon (--force for protected ones)
  edit TARGET FIELD=VALUE ...       Set name, description, logo or background
  catalog TARGET POSITION NAME      Rename one catalog
  load                              Discard local edits and reload from the server
  sync                              Replace the server collection with the local one
  help                              Show this help
  quit                              Leave (unsynced edits are lost)

TARGET is a zero-based position or an addon id / transport URL."""

EDITABLE_FIELDS = ("name", "description", "logo", "background")


class ShellUsageError(Exception):
    """Malformed shell command."""


class AddonShell:
    """Dispatches shell command lines against one SyncController."""

    def __init__(self, controller: SyncController, display: CollectionDisplay):
        self.controller = controller
        self.display = display
        self.dirty = False

    @property
    def store(self):
        return self.controller.store

    async def dispatch(self, line: str) -> bool:
        """Execute one command line.

        Returns:
            False when the session should end, True otherwise
        """
        try:
            words = shlex.split(line)
        except ValueError as e:
            self.display.notify_error(f"Could not parse command: {e}")
            return True
        if not words:
            return True

        command, args = words[0].lower(), words[1:]
        if command in ("quit", "exit", "q"):
            return False

        handler = getattr(self, f"_cmd_{command}", None)
        if handler is None:
            self.display.notify_error(f"Unknown command '{command}'. Type 'help' for commands.")
            return True

        try:
            await handler(args)
        except ShellUsageError as e:
            self.display.notify_error(str(e))
        except CollectionError as e:
            self.display.notify_error(format_error_message(e))
        except AddonManagerError:
            # Remote and auth errors were already reported by the controller
            logger.debug(f"Shell command '{command}' failed", exc_info=True)
        return True

    async def _cmd_help(self, args: list[str]) -> None:
        self.display.console.print(SHELL_HELP, markup=False)

    async def _cmd_list(self, args: list[str]) -> None:
        self.display.render(self.store.snapshot())

    _cmd_ls = _cmd_list

    async def _cmd_show(self, args: list[str]) -> None:
        if len(args) != 1:
            raise ShellUsageError("Usage: show TARGET")
        position = resolve_target(self.store, args[0])
        self.display.render_addon(self.store.get(position), position)

    async def _cmd_move(self, args: list[str]) -> None:
        if len(args) != 2 or not args[1].lstrip("-").isdigit():
            raise ShellUsageError("Usage: move TARGET POSITION")
        self.store.reorder(resolve_target(self.store, args[0]), int(args[1]))
        self._changed()

    async def _cmd_remove(self, args: list[str]) -> None:
        force = "--force" in args
        targets = [arg for arg in args if arg != "--force"]
        if len(targets) != 1:
            raise ShellUsageError("Usage: remove TARGET [--force]")
        self.store.remove_at(resolve_target(self.store, targets[0]), override=force)
        self._changed()

    _cmd_rm = _cmd_remove

    async def _cmd_edit(self, args: list[str]) -> None:
        if len(args) < 2:
            raise ShellUsageError("Usage: edit TARGET FIELD=VALUE ...")
        fields = {}
        for assignment in args[1:]:
            field, sep, value = assignment.partition("=")
            if not sep or field not in EDITABLE_FIELDS:
                raise ShellUsageError(f"Expected FIELD=VALUE with FIELD one of {', '.join(EDITABLE_FIELDS)}")
            fields[field] = value
        self.store.edit_manifest_at(resolve_target(self.store, args[0]), **fields)
        self._changed()

    async def _cmd_catalog(self, args: list[str]) -> None:
        if len(args) < 3 or not args[1].isdigit():
            raise ShellUsageError("Usage: catalog TARGET POSITION NAME")
        self.store.edit_catalog_name_at(resolve_target(self.store, args[0]), int(args[1]), " ".join(args[2:]))
        self._changed()

    async def _cmd_load(self, args: list[str]) -> None:
        await self.controller.load()
        self.dirty = False

    _cmd_refresh = _cmd_load

    async def _cmd_sync(self, args: list[str]) -> None:
        await self.controller.save()
        self.dirty = False
        await self.controller.load()

    def _changed(self) -> None:
        self.dirty = True
        self.display.render(self.store.snapshot())


def _create_prompt_session() -> PromptSession:
    """Create PromptSession with persistent history at ~/.addon-manager/shell_history."""
    history_path = Path.home() / ".addon-manager" / "shell_history"
    history_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        history = FileHistory(str(history_path))
    except OSError as e:
        history = InMemoryHistory()
        logger.warning(f"Could not load history from {history_path}: {e}. Using in-memory history for this session.")

    return PromptSession(
        message=HTML("<ansimagenta><b>addons&gt;</b></ansimagenta> "),
        history=history,
        enable_history_search=True,
    )


async def run_shell(shell: AddonShell, prompt_session: PromptSession) -> None:
    """Initial load, then read-dispatch until quit or EOF."""
    try:
        await shell.controller.load()
    except AddonManagerError:
        shell.display.show_message("Use 'load' to retry once the problem is fixed.", "warning")

    while True:
        try:
            line = await prompt_session.prompt_async()
        except KeyboardInterrupt:
            continue
        except EOFError:
            break
        if not await shell.dispatch(line):
            break

    if shell.dirty:
        shell.display.show_message("Unsynced edits were discarded", "warning")


@click.command()
def shell():
    """Edit the collection interactively and sync when done.

    Type 'help' inside the shell for commands.
    """
    display = CollectionDisplay(console)
    controller = create_controller(display)
    console.print("[dim]Type 'help' for commands, 'quit' to leave.[/dim]")
    asyncio.run(run_shell(AddonShell(controller, display), _create_prompt_session()))
