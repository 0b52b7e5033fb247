"""FolderTracker: snapshot a tracked folder, diff it, and file the changes."""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from gdrivewatch.config import TrackerSettings
from gdrivewatch.controller import GoogleDriveController
from gdrivewatch.diff import ChangeDetector, ModificationClassifier
from gdrivewatch.errors import GDriveWatchError, InvalidReferenceError, InvalidStateError
from gdrivewatch.ledger import ChangeLedger
from gdrivewatch.models import (
    Change,
    ChangeRecord,
    CheckResult,
    Removed,
    Snapshot,
    TrackedFolder,
)
from gdrivewatch.snapshot import SnapshotBuilder, build_folder_structure
from gdrivewatch.util.mime import is_folder
from gdrivewatch.util.refs import extract_folder_id

logger = logging.getLogger(__name__)


class FolderTracker:
    """
    Orchestrates one check per folder: build snapshot -> detect -> persist.

    Checks of the same folder are serialized with a per-folder lock so the
    detector never compares against a half-updated previous snapshot. Checks
    of different folders share no state and may run concurrently.
    """

    def __init__(
        self,
        controller: GoogleDriveController,
        ledger: ChangeLedger,
        *,
        detector: Optional[ChangeDetector] = None,
    ) -> None:
        self._controller = controller
        self._ledger = ledger
        self._builder = SnapshotBuilder(controller)
        self._detector = detector or ChangeDetector(ModificationClassifier(controller))
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Optional[TrackerSettings] = None) -> "FolderTracker":
        """Wire controller, ledger and detector from settings (env by default)."""
        settings = settings or TrackerSettings()
        controller = GoogleDriveController(
            settings.auth_info(),
            supports_all_drives=settings.supports_all_drives,
            retry_policy=settings.retry_policy,
        )
        ledger = ChangeLedger(
            settings.database_url,
            duplicate_window=settings.duplicate_window,
        )
        ledger.initialize()
        detector = ChangeDetector(
            ModificationClassifier(controller),
            rename_threshold=settings.rename_threshold,
        )
        return cls(controller, ledger, detector=detector)

    # ----------------------------
    # Tracked folder management
    # ----------------------------
    def add_folder(self, reference: str) -> TrackedFolder:
        """
        Start tracking a folder. The first check stores its baseline.

        Raises:
            InvalidReferenceError: if reference is unusable or not a folder.
            InvalidStateError: if the folder is already tracked.
        """
        folder_id = extract_folder_id(reference)
        if self._ledger.get_tracked_folder(folder_id) is not None:
            raise InvalidStateError(
                "Folder is already being tracked",
                details={"folder_id": folder_id},
            )

        folder = self._get_folder(folder_id)
        tracked = self._ledger.add_tracked_folder(folder_id, folder.get("name", ""))
        logger.info("Added new folder to tracking: %s", tracked.folder_name)
        return tracked

    def list_folders(self) -> list[TrackedFolder]:
        return self._ledger.list_tracked_folders()

    def set_active(self, reference: str, is_active: bool) -> TrackedFolder:
        folder_id = extract_folder_id(reference)
        tracked = self._ledger.set_active(folder_id, is_active)
        if tracked is None:
            raise InvalidStateError("Folder is not tracked", details={"folder_id": folder_id})
        return tracked

    def remove_folder(self, reference: str) -> None:
        folder_id = extract_folder_id(reference)
        with self._folder_lock(folder_id):
            if not self._ledger.remove_tracked_folder(folder_id):
                raise InvalidStateError("Folder is not tracked", details={"folder_id": folder_id})
        with self._locks_guard:
            self._locks.pop(folder_id, None)
        logger.info("Removed folder from tracking: %s", folder_id)

    def list_changes(self, reference: str) -> list[ChangeRecord]:
        """Change history of a folder, newest first."""
        return self._ledger.list_changes(extract_folder_id(reference))

    def folder_structure(self, reference: str) -> dict[str, Any]:
        """Nested tree view of the folder's stored snapshot."""
        return build_folder_structure(self._ledger.get_snapshot(extract_folder_id(reference)))

    # ----------------------------
    # Checks
    # ----------------------------
    def check_folder(self, reference: str) -> CheckResult:
        """
        Check one folder for changes since its stored snapshot.

        The first check of a folder only stores the baseline. Source errors
        propagate; nothing is persisted for a failed check.

        Raises:
            InvalidReferenceError: if reference is unusable or not a folder.
            InvalidStateError: if tracking of the folder is disabled.
            SourceError: if Drive listing fails.
        """
        folder_id = extract_folder_id(reference)

        with self._folder_lock(folder_id):
            tracked = self._ledger.get_tracked_folder(folder_id)
            if tracked is not None and not tracked.is_active:
                raise InvalidStateError(
                    "Folder tracking is disabled",
                    details={"folder_id": folder_id},
                )

            folder_name = self._get_folder(folder_id).get("name", "")
            current = self._builder.build(folder_id)
            previous = tracked.snapshot if tracked is not None else None

            if previous is None:
                self._ledger.save_snapshot(folder_id, folder_name, current)
                logger.info(
                    "Initial folder contents stored for %s; no changes recorded",
                    folder_name,
                )
                return CheckResult(folder_id, folder_name, changes=[], baseline=True)

            changes = self._detector.detect(current, previous)
            parent_names = _ParentNames(folder_id, folder_name, current, previous)
            entries = [
                (change, self._resolve_parent_name(change, parent_names)) for change in changes
            ]
            # Snapshot and change rows commit together or not at all.
            recorded = self._ledger.save_check(folder_id, folder_name, current, entries)

        logger.info(
            "Folder %s checked: %d changes detected, %d recorded",
            folder_name,
            len(changes),
            recorded,
        )
        return CheckResult(folder_id, folder_name, changes=changes, recorded=recorded)

    def check_all(self) -> tuple[list[CheckResult], dict[str, GDriveWatchError]]:
        """
        Check every active tracked folder.

        A failing folder does not stop the others; its error is returned keyed
        by folder id.
        """
        results: list[CheckResult] = []
        failures: dict[str, GDriveWatchError] = {}

        for tracked in self._ledger.list_tracked_folders():
            if not tracked.is_active:
                continue
            try:
                results.append(self.check_folder(tracked.folder_id))
            except GDriveWatchError as exc:
                logger.warning("Check failed for %s: %s", tracked.folder_id, exc)
                failures[tracked.folder_id] = exc

        return results, failures

    # ----------------------------
    # Internals
    # ----------------------------
    def _folder_lock(self, folder_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(folder_id, threading.Lock())

    def _get_folder(self, folder_id: str) -> dict[str, Any]:
        folder = self._controller.get(folder_id)
        if not is_folder(folder.get("mimeType")):
            raise InvalidReferenceError(
                "Reference does not point to a folder",
                details={"folder_id": folder_id, "mime_type": folder.get("mimeType")},
            )
        return folder

    def _resolve_parent_name(self, change: Change, names: "_ParentNames") -> str:
        parent_id = change.item.parent_id
        if parent_id is None:
            return "root"

        name = names.lookup(parent_id, prefer_previous=isinstance(change, Removed))
        if name is not None:
            return name
        return self._controller.get_parent_name(change.item.id)


class _ParentNames:
    """Parent-id -> display-name lookup over the root and both snapshots."""

    def __init__(
        self,
        root_id: str,
        root_name: str,
        current: Snapshot,
        previous: Snapshot,
    ) -> None:
        self._root_id = root_id
        self._root_name = root_name
        self._current = {item.id: item.name for item in current}
        self._previous = {item.id: item.name for item in previous}

    def lookup(self, parent_id: str, *, prefer_previous: bool) -> Optional[str]:
        if parent_id == self._root_id:
            return self._root_name
        first, second = (
            (self._previous, self._current) if prefer_previous else (self._current, self._previous)
        )
        return first.get(parent_id, second.get(parent_id))
