"""Nested tree view of a snapshot, keyed by path segment."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from gdrivewatch.models import Item
from gdrivewatch.util.mime import is_folder


def build_folder_structure(items: Optional[Iterable[Item]]) -> dict[str, Any]:
    """
    Build `{name, type, children}` nodes from the items' full paths.

    Leaf nodes also carry id, mimeType, modifiedTime and size. Intermediate
    path segments are folders.
    """
    structure: dict[str, Any] = {"name": "root", "type": "folder", "children": {}}
    if not items:
        return structure

    for item in items:
        segments = item.full_path.split("/") if item.full_path else [item.name]
        node = structure
        for index, segment in enumerate(segments):
            is_leaf = index == len(segments) - 1
            children = node["children"]
            if segment not in children:
                children[segment] = _new_node(segment, item if is_leaf else None)
            node = children[segment]

    return structure


def _new_node(name: str, leaf: Optional[Item]) -> dict[str, Any]:
    if leaf is None:
        return {"name": name, "type": "folder", "children": {}}

    return {
        "name": name,
        "type": "folder" if is_folder(leaf.mime_type) else "file",
        "children": {},
        "id": leaf.id,
        "mimeType": leaf.mime_type,
        "modifiedTime": leaf.modified_time,
        "size": leaf.size,
    }
