"""Load/save orchestration between the remote API and the local store.

Ordering rules enforced here:
1. Resolve the auth key (AuthError, no network, if missing)
2. Take the per-direction in-flight guard (SyncInProgressError if held)
3. Perform the single remote exchange
4. Release the guard
5. Report the outcome to the collaborators (render / notify_success / notify_error)

Load and save guards are independent. A save sends the snapshot read when
``save()`` starts; later local edits go out with the next save.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Sequence
from dataclasses import dataclass

from ..exceptions import AddonManagerError
from ..exceptions import AuthError
from ..exceptions import SyncInProgressError
from ..models import AddonEntry
from ..utils.error_format import format_error_message
from .client import RemoteCollectionClient
from .store import CollectionStore

logger = logging.getLogger(__name__)


def _noop(*args, **kwargs) -> None:
    return None


@dataclass
class SessionContext:
    """Collaborators for one editing session.

    Replaces process-wide auth/collection globals: one context per session,
    passed explicitly into the controller.
    """

    get_auth_token: Callable[[], str | None]
    render: Callable[[Sequence[AddonEntry]], None] = _noop
    notify_error: Callable[[str], None] = _noop
    notify_success: Callable[[], None] = _noop


class SyncController:
    """Runs ``load`` and ``save`` against the remote collection, one at a time per direction."""

    def __init__(self, context: SessionContext, store: CollectionStore, client: RemoteCollectionClient):
        self.context = context
        self.store = store
        self.client = client
        self._loading = False
        self._saving = False

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_saving(self) -> bool:
        return self._saving

    def _fail(self, error: AddonManagerError) -> AddonManagerError:
        """Report a terminal error to the user and hand it back for raising."""
        message = format_error_message(error)
        logger.error(f"Sync error: {message}", extra={"context": error.context})
        self.context.notify_error(message)
        return error

    def _require_auth_key(self, action: str) -> str:
        auth_key = self.context.get_auth_token()
        if not auth_key:
            raise self._fail(
                AuthError(f"Authentication key not found. Please log in before you {action} addons.")
            )
        return auth_key

    async def load(self) -> list[AddonEntry]:
        """Fetch the remote collection and install it in the store.

        Returns:
            Snapshot of the freshly loaded collection

        Raises:
            AuthError: No auth key available
            SyncInProgressError: A load is already outstanding
            RemoteError: Fetch failed; the store keeps its previous contents
        """
        auth_key = self._require_auth_key("load")
        if self._loading:
            raise self._fail(SyncInProgressError("A load is already in progress"))

        self._loading = True
        try:
            entries = await self.client.fetch_collection(auth_key)
        except AddonManagerError as e:
            self._loading = False
            self._fail(e)
            raise
        except BaseException:
            # Cancellation or an unexpected bug must not leave the guard held
            self._loading = False
            raise
        self.store.replace_all(entries)
        self._loading = False

        snapshot = self.store.snapshot()
        self.context.render(snapshot)
        return snapshot

    async def save(self) -> None:
        """Replace the remote collection with the store's current contents.

        Raises:
            AuthError: No auth key available
            SyncInProgressError: A save is already outstanding
            RemoteError: Replace failed; local contents are left intact for a deliberate retry
        """
        auth_key = self._require_auth_key("sync")
        if self._saving:
            raise self._fail(SyncInProgressError("A sync is already in progress"))

        self._saving = True
        try:
            await self.client.replace_collection(auth_key, self.store.snapshot())
        except AddonManagerError as e:
            self._saving = False
            self._fail(e)
            raise
        except BaseException:
            # Cancellation or an unexpected bug must not leave the guard held
            self._saving = False
            raise
        self._saving = False

        self.context.notify_success()
