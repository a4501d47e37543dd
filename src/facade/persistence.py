from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Type, TypeVar

from access.platform import Filesystem, LocalAccessControl, LocalBookmarkService, LocalFilesystem
from access.scope import SecureAccessScope
from common.codec import decode, encode
from common.errors import EzioError
from common.settings import Settings
from state.bookmarks import BookmarkRegistry
from state.kv_store import FileKeyValueStore, KeyValueStore
from state.models import ResourceHandle

from .picker import ContentType, Picked, Picker, PickerCompletion, PickerIntent, PickerOutcome, PickerRequest


logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorHandler = Callable[[EzioError], None]

DEFAULT_ALLOWED_TYPES = (ContentType.FOLDER,)


class Completion(str, Enum):
    """Synchronous result of a load/save call."""

    DONE = "done"
    PENDING = "pending"  # picker shown, result arrives later
    CANCELLED = "cancelled"
    FAILED = "failed"
    SKIPPED = "skipped"  # supplier declined to provide a value


class PersistenceFacade:
    """
    Save/load typed values in a user-chosen external folder, remembered by key.

    Per call:
    1. Resolve the stored Locator for the key. Absent or stale -> prompt.
    2. Prompt: present the picker; cancel is a silent no-op.
    3. Access: bracket the folder with an access grant.
    4. Transfer: read + decode + `handler(value)`, or encode + write.
    5. Commit: store a fresh Locator for the folder under the key.

    Failures reach `on_error` (or are logged when none is given) and leave the
    stored Locator untouched. Nothing raises past this class except exceptions
    from the caller's own handler/supplier.
    """

    def __init__(
        self,
        registry: BookmarkRegistry,
        picker: Picker,
        *,
        scope: Optional[SecureAccessScope] = None,
        filesystem: Optional[Filesystem] = None,
        pretty: bool = False,
    ) -> None:
        self._registry = registry
        self._picker = picker
        self._scope = scope or SecureAccessScope()
        self._fs = filesystem or LocalFilesystem()
        self._pretty = pretty

    # -------- Construction helpers --------
    @classmethod
    def local(
        cls,
        picker: Picker,
        *,
        store: Optional[KeyValueStore] = None,
        settings: Optional[Settings] = None,
    ) -> "PersistenceFacade":
        """Wire local-filesystem services; the store defaults to `EZIO_STORE_PATH`."""
        settings = settings or Settings.from_env()
        scope = SecureAccessScope(LocalAccessControl())
        registry = BookmarkRegistry(
            store or FileKeyValueStore(settings.store_path),
            service=LocalBookmarkService(),
            scope=scope,
        )
        return cls(registry, picker, scope=scope, filesystem=LocalFilesystem(), pretty=settings.pretty_json)

    # -------- Public API --------
    def load(
        self,
        key: str,
        file_name: str,
        target_type: Type[T],
        handler: Callable[[T], Any],
        on_error: Optional[ErrorHandler] = None,
        *,
        allowed_types: Sequence[ContentType] = DEFAULT_ALLOWED_TYPES,
    ) -> Completion:
        """Load `file_name` from the remembered folder (or a newly chosen one)
        and pass the decoded value to `handler`. An empty `key` means `file_name`."""
        key = key or file_name
        handle = self._registry.resolve_fresh(key)
        if handle is not None:
            return self._load_from(key, handle, file_name, target_type, handler, on_error)
        request = PickerRequest(PickerIntent.OPEN, tuple(allowed_types))
        return self._prompt(
            request,
            lambda h: self._load_from(key, h, file_name, target_type, handler, on_error),
        )

    def save(
        self,
        key: str,
        file_name: str,
        supplier: Callable[[], Optional[Any]],
        on_error: Optional[ErrorHandler] = None,
        *,
        pretty: Optional[bool] = None,
        allowed_types: Sequence[ContentType] = DEFAULT_ALLOWED_TYPES,
    ) -> Completion:
        """Ask `supplier` for a value and write it as `file_name` in the
        remembered (or newly chosen) folder. A None value skips the save."""
        value = supplier()
        if value is None:
            logger.debug("save %r skipped by supplier", file_name)
            return Completion.SKIPPED
        key = key or file_name
        use_pretty = self._pretty if pretty is None else pretty
        handle = self._registry.resolve_fresh(key)
        if handle is not None:
            return self._save_to(key, handle, file_name, value, use_pretty, on_error)
        # value is held by the closure while the picker is up
        request = PickerRequest(PickerIntent.SAVE, tuple(allowed_types))
        return self._prompt(
            request,
            lambda h: self._save_to(key, h, file_name, value, use_pretty, on_error),
        )

    def forget(self, key: str) -> None:
        """Drop the remembered location for `key`; the next call prompts."""
        self._registry.remove(key)

    # -------- Internal --------
    def _prompt(self, request: PickerRequest, on_pick: Callable[[ResourceHandle], Completion]) -> Completion:
        result = []

        def _finish(outcome: PickerOutcome) -> None:
            if isinstance(outcome, Picked):
                result.append(on_pick(outcome.handle))
            else:
                logger.debug("picker cancelled (%s)", request.intent.value)
                result.append(Completion.CANCELLED)

        completion = PickerCompletion(_finish)
        logger.debug("presenting picker: %s %s", request.intent.value, [t.value for t in request.allowed_types])
        self._picker.present(request, completion)
        return result[0] if result else Completion.PENDING

    def _load_from(
        self,
        key: str,
        handle: ResourceHandle,
        file_name: str,
        target_type: Type[T],
        handler: Callable[[T], Any],
        on_error: Optional[ErrorHandler],
    ) -> Completion:
        try:
            with self._scope.access(handle):
                value = decode(self._fs.read_bytes(handle, file_name), target_type)
        except EzioError as ex:
            return self._fail(f"failed loading {file_name!r} from folder", ex, on_error)
        handler(value)
        return self._commit(key, handle, on_error)

    def _save_to(
        self,
        key: str,
        handle: ResourceHandle,
        file_name: str,
        value: Any,
        pretty: bool,
        on_error: Optional[ErrorHandler],
    ) -> Completion:
        try:
            with self._scope.access(handle):
                self._fs.write_bytes(handle, file_name, encode(value, pretty=pretty))
        except EzioError as ex:
            return self._fail(f"didn't save {file_name!r} in folder", ex, on_error)
        return self._commit(key, handle, on_error)

    def _commit(self, key: str, handle: ResourceHandle, on_error: Optional[ErrorHandler]) -> Completion:
        try:
            locator = self._registry.create(handle)
            self._registry.store(key, locator)
        except EzioError as ex:
            return self._fail(f"failed storing bookmark {key!r}", ex, on_error)
        return Completion.DONE

    @staticmethod
    def _fail(context: str, err: EzioError, on_error: Optional[ErrorHandler]) -> Completion:
        if on_error is None:
            logger.warning("%s: %s", context, err)
        else:
            logger.debug("%s: %s", context, err)
            on_error(err)
        return Completion.FAILED


__all__ = ["PersistenceFacade", "Completion", "DEFAULT_ALLOWED_TYPES"]
