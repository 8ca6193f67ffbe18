"""CLI command groups for addon-manager."""

__all__ = [
    "addon",
    "auth",
    "config",
    "shell",
]
