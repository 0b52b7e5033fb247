"""Snapshot model: one point-in-time traversal of a folder subtree."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterator

from .item import Item


@dataclass(slots=True, frozen=True)
class Snapshot:
    """
    Ordered, immutable collection of Items keyed by the root folder's id.

    The root folder itself is not part of items.
    """

    root_id: str
    items: tuple[Item, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    # ----------------------------
    # Indexes
    # ----------------------------
    def by_id(self) -> dict[str, Item]:
        return {item.id: item for item in self.items}

    def by_parent_and_name(self) -> dict[str, Item]:
        """
        Index by `parentId + "/" + name` for callers that look items up by
        location. The detector matches by id and name similarity instead.
        Later items win on collision.
        """
        return {f"{item.parent_id or ''}/{item.name}": item for item in self.items}

    @property
    def total_size(self) -> int:
        return sum(item.size_or_zero for item in self.items)

    @property
    def owner_email(self) -> str | None:
        """First owner of the first item, used for tracked-folder bookkeeping."""
        if not self.items or not self.items[0].owners:
            return None
        return self.items[0].owners[0]

    # ----------------------------
    # Serialization
    # ----------------------------
    def to_list(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.items]

    def to_json(self) -> str:
        return json.dumps(self.to_list())

    @classmethod
    def from_list(cls, root_id: str, data: list[dict[str, Any]]) -> Snapshot:
        return cls(root_id=root_id, items=tuple(Item.from_dict(d) for d in data))

    @classmethod
    def from_json(cls, root_id: str, payload: str) -> Snapshot:
        data = json.loads(payload)
        if not isinstance(data, list):
            raise ValueError("Snapshot JSON must be a list of item records")
        return cls.from_list(root_id, data)
