from __future__ import annotations

import logging
from typing import Optional

from access.platform import BookmarkService, LocalBookmarkService
from access.scope import SecureAccessScope
from common.codec import decode, encode
from common.errors import DecodeError, NotFound, StaleLocator

from .kv_store import KeyValueStore
from .models import Locator, ResourceHandle, Resolution


logger = logging.getLogger(__name__)


class BookmarkRegistry:
    """
    Maps a logical key to a Locator for an external resource.

    Usage
    - `create(handle)` asks the platform for bookmark bytes while holding an
      access grant for the handle.
    - `store(key, locator)` / `load(key)` persist the Locator through the
      key-value store.
    - `resolve(locator)` turns it back into a handle plus a staleness flag;
      a stale handle must not be reused. Re-prompt the user and `store` a
      fresh Locator once access is granted again.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        service: Optional[BookmarkService] = None,
        scope: Optional[SecureAccessScope] = None,
    ) -> None:
        self._store = store
        self._service = service or LocalBookmarkService()
        self._scope = scope or SecureAccessScope()

    def create(self, handle: ResourceHandle) -> Locator:
        """Raises PermissionDenied if access cannot be obtained, IOFailure if
        the platform cannot issue a bookmark."""
        with self._scope.access(handle):
            data = self._service.create_bookmark(handle)
        return Locator.from_bytes(data)

    def resolve(self, locator: Locator) -> Resolution:
        try:
            data = locator.data
        except ValueError as ex:
            raise StaleLocator("locator token is not valid base64") from ex
        return self._service.resolve_bookmark(data)

    def store(self, key: str, locator: Locator) -> None:
        self._store.set(key, encode(locator))

    def load(self, key: str) -> Locator:
        """Raises NotFound when nothing (readable) is stored under `key`."""
        raw = self._store.get(key)
        try:
            return decode(raw, Locator)
        except DecodeError:
            logger.warning("unreadable locator under %r; treating as absent", key)
            raise NotFound(key) from None

    def remove(self, key: str) -> None:
        self._store.delete(key)

    def resolve_fresh(self, key: str) -> Optional[ResourceHandle]:
        """Handle for `key`, or None when absent, unresolvable or stale."""
        try:
            locator = self.load(key)
            handle, stale = self.resolve(locator)
        except NotFound:
            return None
        except StaleLocator as ex:
            logger.info("bookmark %r did not resolve: %s", key, ex)
            return None
        if stale:
            logger.info("bookmark %r is stale", key)
            return None
        return handle


__all__ = ["BookmarkRegistry"]
