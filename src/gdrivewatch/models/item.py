"""Data model for Drive items observed in a snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class Item:
    """
    One file or folder observed in a snapshot.

    Notes:
        - modified_time is kept as the RFC3339 string Drive returned and is
          compared verbatim between snapshots.
        - Only the first parent is kept (single-parent trees).
        - full_path is derived per snapshot from ancestor names.
    """

    id: str
    name: str
    mime_type: str

    modified_time: Optional[str] = None
    size: Optional[int] = None
    parent_id: Optional[str] = None
    full_path: str = ""
    owners: tuple[str, ...] = ()

    @property
    def size_or_zero(self) -> int:
        return self.size if self.size is not None else 0

    @classmethod
    def from_drive(cls, data: dict[str, Any], path_prefix: str = "") -> Item:
        """Build an Item from a raw Drive file dict, deriving full_path."""
        name = data.get("name", "")
        name = name if isinstance(name, str) else ""
        full_path = f"{path_prefix}/{name}" if path_prefix else name

        parents = data.get("parents") or []
        parent_id = parents[0] if isinstance(parents, list) and parents else None

        return cls(
            id=str(data.get("id", "")),
            name=name,
            mime_type=_str_or_empty(data.get("mimeType")),
            modified_time=_str_or_none(data.get("modifiedTime")),
            size=_parse_size(data.get("size")),
            parent_id=parent_id if isinstance(parent_id, str) else None,
            full_path=full_path,
            owners=_parse_owners(data.get("owners")),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation used for persisted snapshots."""
        return {
            "id": self.id,
            "name": self.name,
            "mimeType": self.mime_type,
            "modifiedTime": self.modified_time,
            "size": self.size,
            "parentId": self.parent_id,
            "fullPath": self.full_path,
            "owners": list(self.owners),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        """Inverse of to_dict. Also accepts the raw Drive `parents` list form."""
        parent_id = data.get("parentId")
        if parent_id is None:
            parents = data.get("parents") or []
            parent_id = parents[0] if isinstance(parents, list) and parents else None

        return cls(
            id=str(data["id"]),
            name=_str_or_empty(data.get("name")),
            mime_type=_str_or_empty(data.get("mimeType")),
            modified_time=_str_or_none(data.get("modifiedTime")),
            size=_parse_size(data.get("size")),
            parent_id=parent_id if isinstance(parent_id, str) else None,
            full_path=_str_or_empty(data.get("fullPath")),
            owners=_parse_owners(data.get("owners")),
        )


def _str_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _parse_size(value: Any) -> Optional[int]:
    # Drive returns int64 fields as strings.
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _parse_owners(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    emails: list[str] = []
    for owner in value:
        if isinstance(owner, str):
            emails.append(owner)
        elif isinstance(owner, dict) and isinstance(owner.get("emailAddress"), str):
            emails.append(owner["emailAddress"])
    return tuple(emails)
