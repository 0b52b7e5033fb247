"""Public model exports for gdrivewatch."""

from __future__ import annotations

from .change import (
    Added,
    Change,
    ChangeType,
    ModificationDetails,
    Modified,
    Moved,
    Removed,
    Renamed,
    RevisionInfo,
    change_from_dict,
)
from .item import Item
from .records import ChangeRecord, CheckResult, TrackedFolder
from .snapshot import Snapshot

__all__ = [
    "Item",
    "Snapshot",
    "ChangeType",
    "Change",
    "Added",
    "Removed",
    "Modified",
    "Moved",
    "Renamed",
    "ModificationDetails",
    "RevisionInfo",
    "change_from_dict",
    "TrackedFolder",
    "ChangeRecord",
    "CheckResult",
]
