from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Protocol, Tuple, Union

from state.models import ResourceHandle


logger = logging.getLogger(__name__)


class PickerIntent(str, Enum):
    OPEN = "open"
    SAVE = "save"


class ContentType(str, Enum):
    """Allowed-type filter values understood by pickers."""

    FOLDER = "folder"
    JSON = "json"
    DATA = "data"


@dataclass(frozen=True)
class PickerRequest:
    intent: PickerIntent
    allowed_types: Tuple[ContentType, ...] = (ContentType.FOLDER,)


@dataclass(frozen=True)
class Picked:
    handle: ResourceHandle


@dataclass(frozen=True)
class Cancelled:
    """User dismissed the picker. A terminal state, not an error."""


PickerOutcome = Union[Picked, Cancelled]


@dataclass
class PickerCompletion:
    """
    Single-shot continuation for a picker result.

    - `resolve(handle)` or `cancel()` delivers the outcome to `callback`.
    - Only the first delivery counts; later calls are ignored and logged.
    """

    callback: Callable[[PickerOutcome], None]
    outcome: Optional[PickerOutcome] = field(default=None, init=False)

    @property
    def done(self) -> bool:
        return self.outcome is not None

    def resolve(self, handle: ResourceHandle) -> None:
        self._deliver(Picked(handle))

    def cancel(self) -> None:
        self._deliver(Cancelled())

    def _deliver(self, outcome: PickerOutcome) -> None:
        if self.outcome is not None:
            logger.warning("picker completion already delivered (%s); ignoring %s", self.outcome, outcome)
            return
        self.outcome = outcome
        self.callback(outcome)


class Picker(Protocol):
    """
    Platform file-selection UI.

    `present` shows the UI and returns immediately; the user's choice arrives
    later through `completion` (no timeout).
    """

    def present(self, request: PickerRequest, completion: PickerCompletion) -> None: ...


__all__ = [
    "PickerIntent",
    "ContentType",
    "PickerRequest",
    "Picked",
    "Cancelled",
    "PickerOutcome",
    "PickerCompletion",
    "Picker",
]
