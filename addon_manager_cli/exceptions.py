"""Addon manager exceptions.

Every error carries a human-readable message suitable for ``notify_error``
plus an optional context dict for logging.
"""


class AddonManagerError(Exception):
    """Base exception for addon manager operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (indices, URLs, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class AuthError(AddonManagerError):
    """No auth key is available. Raised before any network call."""


class SyncInProgressError(AddonManagerError):
    """A load or save in the same direction is already outstanding."""


class RemoteError(AddonManagerError):
    """Base exception for remote collection API failures."""


class NetworkError(RemoteError):
    """Transport failure, timeout or non-2xx response."""


class ProtocolError(RemoteError):
    """Response body is not the expected envelope."""


class RemoteRejectedError(RemoteError):
    """The server explicitly reported that the request failed."""


class CollectionError(AddonManagerError):
    """Base exception for local collection mutations."""


class AddonIndexError(CollectionError, IndexError):
    """Addon position is outside the collection."""


class CatalogIndexError(CollectionError, IndexError):
    """Catalog position is outside the manifest's catalogs."""


class ProtectedEntryError(CollectionError):
    """Attempted to remove a protected addon without override."""


class AddonNotFoundError(CollectionError, LookupError):
    """No addon matches the given stable key."""
