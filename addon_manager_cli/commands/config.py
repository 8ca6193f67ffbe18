"""Remote API configuration commands."""

import click
from rich.table import Table

from ..console import console
from ..settings import SCOPES
from ..settings import SettingsManager


@click.group()
def config():
    """Show or change collection API settings."""


@config.command("show")
def show_config():
    """Show the effective API settings."""
    api = SettingsManager().get_api_settings()

    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("API URL", api.url)
    table.add_row("Timeout", f"{api.timeout:g}s")
    console.print(table)


@config.command("set-api")
@click.argument("url", required=False)
@click.option("--timeout", type=float, help="Request timeout in seconds")
@click.option("--scope", type=click.Choice(SCOPES), default="user", show_default=True, help="Settings scope to write")
def set_api(url: str | None, timeout: float | None, scope: str):
    """Set the collection API base URL and/or timeout."""
    if url is None and timeout is None:
        raise click.UsageError("Pass a URL, --timeout, or both.")
    if timeout is not None and timeout <= 0:
        raise click.BadParameter("timeout must be positive", param_hint="--timeout")

    SettingsManager().set_api(url=url, timeout=timeout, scope=scope)
    console.print(f"[green]✓ Updated {scope} API settings[/green]")
