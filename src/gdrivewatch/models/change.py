"""Change variants produced by the change detector."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from .item import Item


class ChangeType(str, Enum):
    """Kinds of differences between two snapshots."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    MOVED = "moved"
    RENAMED = "renamed"


@dataclass(slots=True, frozen=True)
class RevisionInfo:
    """Revision metadata of a Google Doc at classification time."""

    last_revision: Optional[dict[str, Any]]
    revision_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastRevision": self.last_revision,
            "revisionCount": self.revision_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RevisionInfo:
        return cls(
            last_revision=data.get("lastRevision"),
            revision_count=int(data.get("revisionCount") or 0),
        )


@dataclass(slots=True, frozen=True)
class ModificationDetails:
    """What changed for an item whose modified time moved."""

    previous_modified_time: Optional[str]
    new_modified_time: Optional[str]
    previous_size: int
    new_size: int
    size_delta: int
    revision_info: Optional[RevisionInfo] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "previousModifiedTime": self.previous_modified_time,
            "newModifiedTime": self.new_modified_time,
            "previousSize": self.previous_size,
            "newSize": self.new_size,
            "sizeDelta": self.size_delta,
        }
        if self.revision_info is not None:
            data["revisionInfo"] = self.revision_info.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModificationDetails:
        revision = data.get("revisionInfo")
        return cls(
            previous_modified_time=data.get("previousModifiedTime"),
            new_modified_time=data.get("newModifiedTime"),
            previous_size=int(data.get("previousSize") or 0),
            new_size=int(data.get("newSize") or 0),
            size_delta=int(data.get("sizeDelta") or 0),
            revision_info=RevisionInfo.from_dict(revision) if revision else None,
        )


@dataclass(slots=True, frozen=True)
class Added:
    type: ClassVar[ChangeType] = ChangeType.ADDED

    item: Item

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "item": self.item.to_dict()}


@dataclass(slots=True, frozen=True)
class Removed:
    """item is the last-known version from the previous snapshot."""

    type: ClassVar[ChangeType] = ChangeType.REMOVED

    item: Item

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "item": self.item.to_dict()}


@dataclass(slots=True, frozen=True)
class Modified:
    type: ClassVar[ChangeType] = ChangeType.MODIFIED

    item: Item
    details: ModificationDetails

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "item": self.item.to_dict(),
            "modificationDetails": self.details.to_dict(),
        }


@dataclass(slots=True, frozen=True)
class Moved:
    type: ClassVar[ChangeType] = ChangeType.MOVED

    item: Item
    old_parent_id: Optional[str]
    new_parent_id: Optional[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "item": self.item.to_dict(),
            "oldParentId": self.old_parent_id,
            "newParentId": self.new_parent_id,
        }


@dataclass(slots=True, frozen=True)
class Renamed:
    """old_id is the id of the previous-snapshot item consumed as rename source."""

    type: ClassVar[ChangeType] = ChangeType.RENAMED

    item: Item
    old_name: str
    similarity: float
    old_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "item": self.item.to_dict(),
            "oldName": self.old_name,
            "similarity": self.similarity,
            "oldId": self.old_id,
        }


Change = Union[Added, Removed, Modified, Moved, Renamed]


def change_from_dict(data: dict[str, Any]) -> Change:
    """Rebuild a Change from its to_dict() form."""
    change_type = ChangeType(data["type"])
    item = Item.from_dict(data["item"])

    if change_type is ChangeType.ADDED:
        return Added(item)
    if change_type is ChangeType.REMOVED:
        return Removed(item)
    if change_type is ChangeType.MODIFIED:
        return Modified(item, ModificationDetails.from_dict(data["modificationDetails"]))
    if change_type is ChangeType.MOVED:
        return Moved(item, data.get("oldParentId"), data.get("newParentId"))
    return Renamed(
        item,
        old_name=data["oldName"],
        similarity=float(data["similarity"]),
        old_id=data.get("oldId"),
    )
