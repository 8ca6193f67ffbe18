"""Session wiring - APP LAYER POLICY.

Builds the store / client / controller trio for one CLI invocation or one
interactive shell, and resolves user-supplied addon targets to positions.
"""

import logging

from .auth import AuthKeyProvider
from .collection import CollectionStore
from .collection import RemoteCollectionClient
from .collection import SessionContext
from .collection import SyncController
from .exceptions import AddonNotFoundError
from .settings import SettingsManager
from .ui.display import CollectionDisplay

logger = logging.getLogger(__name__)


def create_controller(
    display: CollectionDisplay,
    settings: SettingsManager | None = None,
    render_on_load: bool = True,
) -> SyncController:
    """Create a SyncController wired to the terminal display.

    Args:
        display: Rendering and notify collaborators
        settings: Settings manager (default: standard scopes)
        render_on_load: Render the collection after each successful load
    """
    settings = settings or SettingsManager()
    auth = AuthKeyProvider(settings)
    context = SessionContext(
        get_auth_token=auth.get_auth_token,
        notify_error=display.notify_error,
        notify_success=display.notify_success,
    )
    if render_on_load:
        context.render = display.render

    api_settings = settings.get_api_settings()
    logger.debug(f"Using collection API at {api_settings.url}")
    return SyncController(context, CollectionStore(), RemoteCollectionClient(api_settings))


def resolve_target(store: CollectionStore, target: str) -> int:
    """Resolve a stable key or position to the entry's current position.

    The target is first looked up as a manifest id or transport URL, so an
    addon whose id is all digits is still addressable by key. Only when no
    entry carries that key is an integer target taken as a position. The
    lookup happens at call time, so the result reflects the current order.

    Raises:
        AddonNotFoundError: Target is neither a known key nor an integer
    """
    try:
        return store.index_of(target)
    except AddonNotFoundError:
        if target.lstrip("-").isdigit():
            return int(target)
        raise
