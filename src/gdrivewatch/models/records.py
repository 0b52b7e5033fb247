"""Ledger record models and check results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from gdrivewatch.util.time import to_rfc3339

from .change import Change
from .snapshot import Snapshot


@dataclass(slots=True)
class TrackedFolder:
    """
    A folder under tracking and its most recent snapshot.

    snapshot is None until the first check stores a baseline.
    """

    folder_id: str
    folder_name: str
    is_active: bool = True

    snapshot: Optional[Snapshot] = None
    last_checked: Optional[datetime] = None
    created_at: Optional[datetime] = None
    owner_email: Optional[str] = None
    folder_size: int = 0
    total_items: int = 0

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready summary; the snapshot itself is left out."""
        return {
            "folderId": self.folder_id,
            "folderName": self.folder_name,
            "isActive": self.is_active,
            "lastChecked": _rfc3339_or_none(self.last_checked),
            "createdAt": _rfc3339_or_none(self.created_at),
            "ownerEmail": self.owner_email,
            "folderSize": self.folder_size,
            "totalItems": self.total_items,
        }


@dataclass(slots=True)
class ChangeRecord:
    """One change as filed in the ledger."""

    folder_id: str
    change_type: str
    item_name: str
    parent_name: str
    item_id: str
    full_path: str

    mime_type: Optional[str] = None
    modified_time: Optional[datetime] = None
    size: int = 0
    modification_details: Optional[dict[str, Any]] = None
    additional_data: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    record_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.record_id,
            "folderId": self.folder_id,
            "changeType": self.change_type,
            "itemName": self.item_name,
            "parentName": self.parent_name,
            "itemId": self.item_id,
            "fullPath": self.full_path,
            "mimeType": self.mime_type,
            "modifiedTime": _rfc3339_or_none(self.modified_time),
            "size": self.size,
            "modificationDetails": self.modification_details,
            "additionalData": dict(self.additional_data),
            "createdAt": _rfc3339_or_none(self.created_at),
        }


@dataclass(slots=True)
class CheckResult:
    """
    Outcome of one folder check.

    Notes:
        - baseline is True when no previous snapshot existed; changes is then
          always empty.
        - recorded counts the changes the ledger accepted (duplicates within
          the suppression window are not counted).
    """

    folder_id: str
    folder_name: str
    changes: list[Change]
    recorded: int = 0
    baseline: bool = False


def _rfc3339_or_none(value: Optional[datetime]) -> Optional[str]:
    return to_rfc3339(value) if value is not None else None
