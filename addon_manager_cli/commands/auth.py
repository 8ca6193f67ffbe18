"""Auth key management commands.

Keys live in user settings by default, or in local settings with --local.
They are never echoed back in full.
"""

import click

from ..auth import AuthKeyProvider
from ..console import console
from ..settings import SettingsManager


def _mask(key: str) -> str:
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}…{key[-4:]}"


@click.group()
def auth():
    """Manage the auth key used for the collection API.

    Examples:

        \b
        addon-manager auth set-key 0123abcd...
        addon-manager auth status
        addon-manager auth clear
    """


@auth.command("set-key")
@click.argument("key")
@click.option("--local", is_flag=True, help="Store in .addon-manager/settings.local.yaml (just this directory)")
def set_key(key: str, local: bool):
    """Store the auth key."""
    key = key.strip()
    if not key:
        raise click.BadParameter("auth key cannot be blank", param_hint="KEY")

    scope = "local" if local else "user"
    SettingsManager().set_auth_key(key, scope=scope)
    console.print(f"[green]✓ Stored auth key {_mask(key)} in {scope} settings[/green]")


@auth.command()
@click.option("--local", is_flag=True, help="Clear from local settings instead of user settings")
def clear(local: bool):
    """Remove the stored auth key."""
    scope = "local" if local else "user"
    if SettingsManager().clear_auth_key(scope=scope):
        console.print(f"[green]✓ Cleared auth key from {scope} settings[/green]")
    else:
        console.print(f"[yellow]No auth key stored in {scope} settings[/yellow]")


@auth.command()
def status():
    """Show whether an auth key is available and where it comes from."""
    provider = AuthKeyProvider(SettingsManager())
    key = provider.get_auth_token()
    if not key:
        console.print("[red]✗ No auth key found.[/red]")
        console.print("\nSet one with:")
        console.print("  addon-manager auth set-key KEY")
        return

    console.print(f"[green]✓ Auth key {_mask(key)}[/green] from {provider.describe_source()}")
