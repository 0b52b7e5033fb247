"""Snapshot exports for gdrivewatch."""

from __future__ import annotations

from .builder import SnapshotBuilder, SourceListing, build_snapshot
from .structure import build_folder_structure

__all__ = [
    "SnapshotBuilder",
    "SourceListing",
    "build_snapshot",
    "build_folder_structure",
]
