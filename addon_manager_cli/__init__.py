"""Addon Manager CLI - reorder, rename and prune a remote addon collection."""

__version__ = "0.1.0"
