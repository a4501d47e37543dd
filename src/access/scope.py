from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from common.errors import PermissionDenied
from state.models import ResourceHandle

from .platform import AccessControl, LocalAccessControl


logger = logging.getLogger(__name__)

R = TypeVar("R")


class SecureAccessScope:
    """
    Brackets use of an external resource with an OS access grant.

    The grant is released exactly once per bracket, on every exit path:
    normal return, a failing action, or an exception.
    """

    def __init__(self, control: Optional[AccessControl] = None) -> None:
        self._control = control or LocalAccessControl()

    def with_access(
        self,
        handle: ResourceHandle,
        action: Callable[[ResourceHandle], R],
        on_denied: Optional[Callable[[], None]] = None,
    ) -> Optional[R]:
        """Run `action(handle)` under an access grant.

        If the grant is refused, `on_denied` runs instead, `action` never does,
        and None is returned. Exceptions from `action` propagate after release.
        """
        if not self._control.start_accessing(handle):
            logger.debug("access denied: %s", handle.path)
            if on_denied is not None:
                on_denied()
            return None
        try:
            return action(handle)
        finally:
            self._control.stop_accessing(handle)

    @contextmanager
    def access(self, handle: ResourceHandle) -> Iterator[ResourceHandle]:
        """Context-manager form; raises PermissionDenied if the grant is refused."""
        if not self._control.start_accessing(handle):
            raise PermissionDenied(f"no access to {handle.path}")
        try:
            yield handle
        finally:
            self._control.stop_accessing(handle)


__all__ = ["SecureAccessScope"]
