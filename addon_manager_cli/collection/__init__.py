"""
Addon collection core - local store, remote client and sync orchestration.

Public API:
- CollectionStore: Ordered in-memory collection with index-addressed mutations
- RemoteCollectionClient: Fetch/replace the full collection over the remote API
- SyncController: Guarded load/save between the two
- SessionContext: Auth and render/notify collaborators for one session
"""

from .client import RemoteCollectionClient
from .store import CollectionStore
from .sync import SessionContext
from .sync import SyncController

__all__ = [
    "CollectionStore",
    "RemoteCollectionClient",
    "SessionContext",
    "SyncController",
]
