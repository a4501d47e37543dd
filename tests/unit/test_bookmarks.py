from __future__ import annotations

import json

import pytest

from access.platform import LocalBookmarkService
from access.scope import SecureAccessScope
from common.errors import NotFound, PermissionDenied, StaleLocator
from state.bookmarks import BookmarkRegistry
from state.kv_store import InMemoryKeyValueStore
from state.models import Locator, ResourceHandle


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def registry(store, access_control):
    return BookmarkRegistry(store, service=LocalBookmarkService(), scope=SecureAccessScope(access_control))


def test_create_store_load_resolve_fresh(registry, tmp_path, access_control):
    folder = tmp_path / "F"
    folder.mkdir()
    handle = ResourceHandle(folder)

    locator = registry.create(handle)
    assert access_control.started == access_control.stopped == [folder]

    registry.store("cfg", locator)
    loaded = registry.load("cfg")
    assert loaded == locator

    resolved, stale = registry.resolve(loaded)
    assert stale is False
    assert resolved.path == folder.resolve()
    assert registry.resolve_fresh("cfg") == resolved


def test_create_denied(registry, tmp_path, access_control):
    access_control.deny.add(tmp_path)
    with pytest.raises(PermissionDenied):
        registry.create(ResourceHandle(tmp_path))


def test_renamed_folder_is_stale(registry, tmp_path):
    folder = tmp_path / "F"
    folder.mkdir()
    registry.store("cfg", registry.create(ResourceHandle(folder)))

    folder.rename(tmp_path / "G")

    _, stale = registry.resolve(registry.load("cfg"))
    assert stale is True
    assert registry.resolve_fresh("cfg") is None


def test_removed_folder_is_stale(registry, tmp_path):
    folder = tmp_path / "F"
    folder.mkdir()
    locator = registry.create(ResourceHandle(folder))
    folder.rmdir()
    assert registry.resolve(locator).stale is True


def test_load_missing_and_remove(registry, tmp_path):
    with pytest.raises(NotFound):
        registry.load("cfg")
    assert registry.resolve_fresh("cfg") is None

    registry.store("cfg", registry.create(ResourceHandle(tmp_path)))
    registry.remove("cfg")
    with pytest.raises(NotFound):
        registry.load("cfg")


def test_garbage_locator_does_not_resolve(registry, store):
    with pytest.raises(StaleLocator):
        registry.resolve(Locator.from_bytes(b"not a bookmark"))

    store.set("junk", b"\xff\x00")
    with pytest.raises(NotFound):
        registry.load("junk")
    assert registry.resolve_fresh("junk") is None


def test_unusable_stored_path_resolves_stale():
    data = json.dumps({"path": "/ext/a\x00b", "folder": True, "dev": 1, "ino": 2}).encode("utf-8")
    assert LocalBookmarkService().resolve_bookmark(data).stale is True
