"""In-memory addon collection with index-addressed mutations.

The store is a plain state container: it never renders, logs user-facing
messages or talks to the network. Every mutation validates its indices
before touching ``items`` so a failed call leaves the collection unchanged.
"""

import logging
from collections.abc import Iterable
from collections.abc import Iterator
from typing import Any

from ..exceptions import AddonIndexError
from ..exceptions import AddonNotFoundError
from ..exceptions import CatalogIndexError
from ..exceptions import ProtectedEntryError
from ..models import AddonEntry
from ..models import Manifest

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class CollectionStore:
    """Ordered, locally mutable mirror of the server-held collection.

    Contract:
    - Inputs: AddonEntry sequences and zero-based positions
    - Outputs: Deep-copied snapshots
    - Side Effects: None outside ``items``
    - Errors: AddonIndexError, CatalogIndexError, ProtectedEntryError, AddonNotFoundError
    """

    def __init__(self, entries: Iterable[AddonEntry] | None = None):
        self.items: list[AddonEntry] = [entry.model_copy(deep=True) for entry in entries or []]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[AddonEntry]:
        return iter(self.snapshot())

    def _check_index(self, index: int) -> None:
        # Negative indices are rejected rather than counted from the end
        if not 0 <= index < len(self.items):
            raise AddonIndexError(
                f"Addon position {index} is out of range (collection has {len(self.items)} addons)",
                context={"index": index, "length": len(self.items)},
            )

    def replace_all(self, entries: Iterable[AddonEntry]) -> None:
        """Install ``entries`` as the new authoritative state."""
        self.items = [entry.model_copy(deep=True) for entry in entries]
        logger.debug(f"Collection replaced with {len(self.items)} addons")

    def get(self, index: int) -> AddonEntry:
        """Return a copy of the entry at ``index``."""
        self._check_index(index)
        return self.items[index].model_copy(deep=True)

    def index_of(self, key: str) -> int:
        """Resolve a stable key (manifest id or transport URL) to its current position.

        Raises:
            AddonNotFoundError: No entry carries this key
        """
        for position, entry in enumerate(self.items):
            if key in (entry.manifest_id, entry.transport_url):
                return position
        raise AddonNotFoundError(f"No addon with id or transport URL '{key}'", context={"key": key})

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the entry at ``from_index`` so it ends up at ``to_index``.

        Splice semantics: the entry is removed first and reinserted into the
        shortened list, so ``reorder(0, 2)`` on ``[A, B, C]`` gives ``[B, C, A]``.
        """
        self._check_index(from_index)
        self._check_index(to_index)
        if from_index == to_index:
            return

        moved = self.items.pop(from_index)
        self.items.insert(to_index, moved)
        logger.debug(f"Moved addon '{moved.display_name}' from {from_index} to {to_index}")

    def remove_at(self, index: int, *, override: bool = False) -> AddonEntry:
        """Delete the entry at ``index`` and return it.

        Args:
            index: Position of the entry to remove
            override: Allow removing an entry flagged ``protected``

        Raises:
            AddonIndexError: Position out of range
            ProtectedEntryError: Entry is protected and ``override`` is False
        """
        self._check_index(index)
        entry = self.items[index]
        if entry.is_protected and not override:
            raise ProtectedEntryError(
                f"Addon '{entry.display_name}' is protected and cannot be removed",
                context={"index": index, "key": entry.key},
            )

        removed = self.items.pop(index)
        logger.debug(f"Removed addon '{removed.display_name}' at {index}")
        return removed

    def edit_manifest_at(
        self,
        index: int,
        *,
        name: str | None = _UNSET,
        description: str | None = _UNSET,
        logo: str | None = _UNSET,
        background: str | None = _UNSET,
    ) -> None:
        """Overwrite the editable manifest fields of the entry at ``index``.

        Fields that are not passed are left as they are; passing ``None``
        explicitly clears an optional field. Other manifest data is untouched.
        """
        self._check_index(index)
        updates = {
            "name": name,
            "description": description,
            "logo": logo,
            "background": background,
        }
        updates = {field: value for field, value in updates.items() if value is not _UNSET}
        if "name" in updates and updates["name"] is None:
            updates["name"] = ""

        entry = self.items[index]
        manifest = entry.manifest or Manifest()
        for field, value in updates.items():
            setattr(manifest, field, value)
        # Reassign so a missing or null manifest is serialized with the edits
        entry.manifest = manifest

    def edit_catalog_name_at(self, index: int, catalog_index: int, name: str) -> None:
        """Rename the catalog at ``catalog_index`` without changing catalog order or count."""
        self._check_index(index)
        catalogs = self.items[index].manifest_catalogs
        if not catalogs:
            return
        if not 0 <= catalog_index < len(catalogs):
            raise CatalogIndexError(
                f"Catalog position {catalog_index} is out of range (addon has {len(catalogs)} catalogs)",
                context={"index": index, "catalog_index": catalog_index, "length": len(catalogs)},
            )
        catalogs[catalog_index].name = name

    def snapshot(self) -> list[AddonEntry]:
        """Return a deep copy of the current ordered collection."""
        return [entry.model_copy(deep=True) for entry in self.items]

    def to_wire(self) -> list[dict[str, Any]]:
        """Return the collection as JSON-ready dicts, in order."""
        return [entry.to_wire() for entry in self.items]
