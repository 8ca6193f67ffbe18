"""Addon collection commands - APP LAYER POLICY.

One-shot commands: each invocation loads the collection, applies at most
one edit, renders the result and syncs the full collection back (unless
--dry-run). Edits address addons by position or by stable key, resolved
right after the load.
"""

import asyncio
import logging
from collections.abc import Callable

import click

from ..collection import CollectionStore
from ..collection import SyncController
from ..console import console
from ..exceptions import AddonManagerError
from ..exceptions import CatalogIndexError
from ..exceptions import CollectionError
from ..session import create_controller
from ..session import resolve_target
from ..ui.display import CollectionDisplay
from ..utils.error_format import format_error_message

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "logo", "background")


def parse_catalog_edit(value: str) -> tuple[int, str]:
    """Parse a ``POSITION=NAME`` catalog rename."""
    position, sep, name = value.partition("=")
    if not sep or not position.strip().isdigit():
        raise click.BadParameter(f"expected POSITION=NAME, got '{value}'", param_hint="--catalog")
    return int(position), name


async def _load_edit_sync(
    controller: SyncController,
    display: CollectionDisplay,
    edit: Callable[[CollectionStore], str],
    dry_run: bool,
) -> None:
    """Load, apply ``edit`` to the store, render, then save unless dry-run.

    ``edit`` returns a short description of what changed.
    """
    await controller.load()
    try:
        summary = edit(controller.store)
    except CollectionError as e:
        logger.info(f"Edit rejected: {e.message}")
        display.notify_error(format_error_message(e))
        raise

    display.render(controller.store.snapshot())
    display.show_message(summary)

    if dry_run:
        display.show_message("Dry run: collection not synced", "warning")
        return
    await controller.save()


def _run(ctx: click.Context, coro) -> None:
    """Run ``coro`` and map addon manager errors to exit status 1.

    The error has already been shown through notify_error.
    """
    try:
        asyncio.run(coro)
    except AddonManagerError:
        ctx.exit(1)


@click.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print the collection as JSON")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool):
    """Load and show the addon collection in activation order.

    Examples:

        \b
        addon-manager list
        addon-manager list --json
    """
    display = CollectionDisplay(console, as_json=as_json)
    controller = create_controller(display)
    _run(ctx, controller.load())


@click.command()
@click.argument("target")
@click.pass_context
def show(ctx: click.Context, target: str):
    """Show editable details of one addon.

    TARGET is a zero-based position or an addon id / transport URL.
    """
    display = CollectionDisplay(console)
    controller = create_controller(display, render_on_load=False)

    async def _show() -> None:
        await controller.load()
        try:
            position = resolve_target(controller.store, target)
            entry = controller.store.get(position)
        except CollectionError as e:
            display.notify_error(format_error_message(e))
            raise
        display.render_addon(entry, position)

    _run(ctx, _show())


@click.command()
@click.argument("source")
@click.argument("position", type=int)
@click.option("--dry-run", is_flag=True, help="Apply locally and show the result without syncing")
@click.pass_context
def move(ctx: click.Context, source: str, position: int, dry_run: bool):
    """Move an addon to a new position.

    SOURCE is a zero-based position or an addon id / transport URL.
    POSITION is where the addon ends up after the move.

    Examples:

        \b
        # Make the third addon the first one
        addon-manager move 2 0

        \b
        # Move an addon by id to the end of a 5-addon collection
        addon-manager move org.example.addon 4
    """
    display = CollectionDisplay(console)
    controller = create_controller(display, render_on_load=False)

    def _edit(store: CollectionStore) -> str:
        from_index = resolve_target(store, source)
        store.reorder(from_index, position)
        return f"Moved addon from {from_index} to {position}"

    _run(ctx, _load_edit_sync(controller, display, _edit, dry_run))


@click.command()
@click.argument("target")
@click.option("--force", is_flag=True, help="Also remove protected addons")
@click.option("--dry-run", is_flag=True, help="Apply locally and show the result without syncing")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def remove(ctx: click.Context, target: str, force: bool, dry_run: bool, yes: bool):
    """Remove an addon from the collection.

    TARGET is a zero-based position or an addon id / transport URL.
    Protected addons are refused unless --force is given.
    """
    if not yes and not dry_run:
        click.confirm(f"Remove addon '{target}' from your collection?", abort=True)

    display = CollectionDisplay(console)
    controller = create_controller(display, render_on_load=False)

    def _edit(store: CollectionStore) -> str:
        removed = store.remove_at(resolve_target(store, target), override=force)
        return f"Removed '{removed.display_name}'"

    _run(ctx, _load_edit_sync(controller, display, _edit, dry_run))


@click.command()
@click.argument("target")
@click.option("--name", help="New display name")
@click.option("--description", help="New description")
@click.option("--logo", help="New logo URL")
@click.option("--background", help="New background URL")
@click.option("--catalog", "catalogs", multiple=True, metavar="POSITION=NAME", help="Rename a catalog (repeatable)")
@click.option("--dry-run", is_flag=True, help="Apply locally and show the result without syncing")
@click.pass_context
def edit(
    ctx: click.Context,
    target: str,
    name: str | None,
    description: str | None,
    logo: str | None,
    background: str | None,
    catalogs: tuple[str, ...],
    dry_run: bool,
):
    """Edit an addon's name, description, images or catalog names.

    TARGET is a zero-based position or an addon id / transport URL.
    Options that are not given leave the field unchanged.

    Examples:

        \b
        addon-manager edit 0 --name "Cinemeta" --description "Official metadata"
        addon-manager edit org.example.addon --catalog 0=Popular --catalog 1=Trending
    """
    catalog_edits = [parse_catalog_edit(value) for value in catalogs]
    fields = {
        field: value
        for field, value in zip(EDITABLE_FIELDS, (name, description, logo, background), strict=True)
        if value is not None
    }
    if not fields and not catalog_edits:
        raise click.UsageError("Nothing to edit. Pass at least one of --name/--description/--logo/--background/--catalog.")

    display = CollectionDisplay(console)
    controller = create_controller(display, render_on_load=False)

    def _edit(store: CollectionStore) -> str:
        index = resolve_target(store, target)
        # All catalog positions are checked before any field is written
        catalog_count = len(store.get(index).manifest_catalogs)
        out_of_range = [position for position, _ in catalog_edits if catalog_count and position >= catalog_count]
        if out_of_range:
            raise CatalogIndexError(
                f"Catalog position {out_of_range[0]} is out of range (addon has {catalog_count} catalogs)",
                context={"index": index, "catalog_index": out_of_range[0], "length": catalog_count},
            )
        store.edit_manifest_at(index, **fields)
        for catalog_index, catalog_name in catalog_edits:
            store.edit_catalog_name_at(index, catalog_index, catalog_name)
        changed = [*fields, *(f"catalog {catalog_index}" for catalog_index, _ in catalog_edits)]
        return f"Updated {', '.join(changed)} of addon {index}"

    _run(ctx, _load_edit_sync(controller, display, _edit, dry_run))
