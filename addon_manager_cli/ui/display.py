"""CLI display system for addon collections using rich terminal UX."""

import json
import logging
from collections.abc import Sequence
from typing import Literal

from rich.console import Console
from rich.table import Table

from ..models import AddonEntry
from ..models import Manifest
from ..utils.error_format import escape_markup

logger = logging.getLogger(__name__)


class CollectionDisplay:
    """Terminal rendering of the collection plus the notify collaborators."""

    def __init__(self, console: Console | None = None, as_json: bool = False):
        self.console = console or Console()
        self.as_json = as_json

    def render(self, collection: Sequence[AddonEntry]) -> None:
        """Render the whole collection in order."""
        if self.as_json:
            self.console.print_json(json.dumps([entry.to_wire() for entry in collection]))
            return

        if not collection:
            self.console.print("[dim]No addons in collection.[/dim]")
            return

        table = Table(title=f"Addons ({len(collection)})", title_justify="left")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Name", style="bold")
        table.add_column("Id", style="cyan")
        table.add_column("Catalogs", justify="right")
        table.add_column("", style="yellow")

        for position, entry in enumerate(collection):
            table.add_row(
                str(position),
                escape_markup(entry.display_name),
                escape_markup(entry.manifest_id or ""),
                str(len(entry.manifest_catalogs)),
                "protected" if entry.is_protected else "",
            )

        self.console.print(table)

    def render_addon(self, entry: AddonEntry, position: int) -> None:
        """Render the editable details of one addon."""
        manifest = entry.manifest or Manifest()
        self.console.print(f"\n[bold]{escape_markup(entry.display_name)}[/bold] [dim]#{position}[/dim]")
        self.console.print("=" * 60)
        if entry.manifest_id:
            self.console.print(f"Id: {escape_markup(entry.manifest_id)}")
        if entry.transport_url:
            self.console.print(f"Transport: {escape_markup(entry.transport_url)}")
        if manifest.description:
            self.console.print(f"\n{escape_markup(manifest.description)}\n")
        self.console.print(f"Logo: {escape_markup(manifest.logo or '-')}")
        self.console.print(f"Background: {escape_markup(manifest.background or '-')}")
        if entry.is_protected:
            self.console.print("[yellow]Protected: cannot be removed[/yellow]")

        catalogs = entry.manifest_catalogs
        if catalogs:
            self.console.print(f"\nCatalogs ({len(catalogs)}):")
            for catalog_position, catalog in enumerate(catalogs):
                self.console.print(f"  {catalog_position}. {escape_markup(catalog.name or '(unnamed)')}")

    def show_message(self, message: str, level: Literal["info", "warning", "error"] = "info"):
        """Display message with severity styling."""
        styles = {
            "info": ("✓", "green"),
            "warning": ("⚠️", "yellow"),
            "error": ("✗", "red"),
        }
        icon, color = styles.get(level, ("•", "blue"))
        self.console.print(f"[{color}]{icon} {escape_markup(message)}[/{color}]")

    def notify_error(self, message: str) -> None:
        self.show_message(message, "error")

    def notify_success(self) -> None:
        self.show_message("Collection synced", "info")
