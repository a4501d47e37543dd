"""
User-facing persistence calls: pick a folder once, then save/load typed
values there by key.
"""

from .persistence import Completion, PersistenceFacade
from .picker import Cancelled, ContentType, Picked, PickerCompletion, PickerIntent, PickerRequest

__all__ = [
    "PersistenceFacade",
    "Completion",
    "Cancelled",
    "ContentType",
    "Picked",
    "PickerCompletion",
    "PickerIntent",
    "PickerRequest",
]
