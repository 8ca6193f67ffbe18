"""Tests for resolving user-supplied addon targets."""

import pytest

from addon_manager_cli.collection.store import CollectionStore
from addon_manager_cli.exceptions import AddonNotFoundError
from addon_manager_cli.models import AddonEntry
from addon_manager_cli.session import resolve_target


@pytest.fixture
def store() -> CollectionStore:
    return CollectionStore(
        [
            AddonEntry.from_wire({"manifest": {"id": "a"}}),
            AddonEntry.from_wire({"manifest": {"id": "0"}}),
            AddonEntry.from_wire({"transportUrl": "https://c/manifest.json", "manifest": None}),
        ]
    )


def test_digit_only_id_resolves_by_key(store):
    assert resolve_target(store, "0") == 1


def test_integer_falls_back_to_position(store):
    assert resolve_target(store, "2") == 2


def test_transport_url(store):
    assert resolve_target(store, "https://c/manifest.json") == 2


def test_negative_position_is_passed_through_for_bounds_check(store):
    assert resolve_target(store, "-1") == -1


def test_unknown_key(store):
    with pytest.raises(AddonNotFoundError):
        resolve_target(store, "org.missing")
