"""UI implementations for CLI environment."""

from .display import CollectionDisplay
from .log_filter import SyncErrorLogFilter

__all__ = ["CollectionDisplay", "SyncErrorLogFilter"]
