"""Snapshot building from a live Drive folder tree."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from gdrivewatch.models import Item, Snapshot
from gdrivewatch.util.mime import is_folder

logger = logging.getLogger(__name__)


class SourceListing(Protocol):
    def list_children(self, folder_id: str) -> list[dict[str, Any]]: ...


class SnapshotBuilder:
    """
    Flatten the folder tree under a root into a Snapshot.

    Traversal is depth-first over an explicit worklist of
    (folder_id, path_prefix) pairs, one listing call per folder. Any listing
    failure propagates; no partial snapshot is returned.
    """

    def __init__(self, source: SourceListing) -> None:
        self._source = source

    def build(self, root_folder_id: str) -> Snapshot:
        items: list[Item] = []
        worklist: list[tuple[str, str]] = [(root_folder_id, "")]
        seen_folders: set[str] = set()

        while worklist:
            folder_id, prefix = worklist.pop()
            if folder_id in seen_folders:
                continue
            seen_folders.add(folder_id)

            raw_children = self._source.list_children(folder_id)
            logger.debug("Listed %d children of %s", len(raw_children), folder_id)

            children = [Item.from_drive(raw, prefix) for raw in raw_children]
            items.extend(children)

            # Reversed so the first subfolder is popped next.
            subfolders = [(c.id, c.full_path) for c in children if is_folder(c.mime_type)]
            worklist.extend(reversed(subfolders))

        return Snapshot(root_id=root_folder_id, items=tuple(items))


def build_snapshot(source: SourceListing, root_folder_id: str) -> Snapshot:
    """Functional form of SnapshotBuilder.build."""
    return SnapshotBuilder(source).build(root_folder_id)
