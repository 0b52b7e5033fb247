"""
Change ledger: tracked-folder snapshots plus an append-only change log.

A change with the same (folder, type, item name, parent name) as one filed
within the duplicate window is dropped instead of recorded.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gdrivewatch.errors import InvalidStateError
from gdrivewatch.models import Change, ChangeRecord, Modified, Snapshot, TrackedFolder
from gdrivewatch.util.time import as_utc, now_utc, parse_rfc3339_or_none

from .tables import Base, FolderChangeRow, TrackedFolderRow

logger = logging.getLogger(__name__)

DEFAULT_DUPLICATE_WINDOW: timedelta = timedelta(hours=1)

_IN_MEMORY_URLS: tuple[str, ...] = ("sqlite://", "sqlite:///:memory:")


class ChangeLedger:
    """SQLAlchemy-backed store for tracked folders and their change history."""

    def __init__(
        self,
        database_url: str = "sqlite:///gdrivewatch.db",
        *,
        duplicate_window: timedelta = DEFAULT_DUPLICATE_WINDOW,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        if database_url in _IN_MEMORY_URLS:
            # One shared connection, otherwise every session sees an empty db.
            self.engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(database_url, echo=False)
        self.SessionLocal = sessionmaker(
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,
        )
        self._duplicate_window = duplicate_window
        self._clock = clock

    def initialize(self) -> None:
        """Create tables if they don't exist."""
        Base.metadata.create_all(bind=self.engine)

    # ----------------------------
    # Tracked folders
    # ----------------------------
    def add_tracked_folder(self, folder_id: str, folder_name: str) -> TrackedFolder:
        """
        Start tracking a folder without a baseline snapshot.

        Raises:
            InvalidStateError: if the folder is already tracked.
        """
        with self._session() as session:
            if _find_folder(session, folder_id) is not None:
                raise InvalidStateError(
                    "Folder is already being tracked",
                    details={"folder_id": folder_id},
                )
            row = TrackedFolderRow(
                google_folder_id=folder_id,
                folder_name=folder_name,
                created_at=self._clock(),
                is_active=True,
                folder_size=0,
                total_items=0,
            )
            session.add(row)
            session.flush()
            return _to_tracked_folder(row)

    def get_tracked_folder(self, folder_id: str) -> Optional[TrackedFolder]:
        with self._session() as session:
            row = _find_folder(session, folder_id)
            return _to_tracked_folder(row) if row is not None else None

    def list_tracked_folders(self) -> list[TrackedFolder]:
        with self._session() as session:
            rows = session.query(TrackedFolderRow).order_by(TrackedFolderRow.id).all()
            return [_to_tracked_folder(row) for row in rows]

    def set_active(self, folder_id: str, is_active: bool) -> Optional[TrackedFolder]:
        """Enable/disable tracking. Returns None if the folder is not tracked."""
        with self._session() as session:
            row = _find_folder(session, folder_id)
            if row is None:
                return None
            row.is_active = is_active
            return _to_tracked_folder(row)

    def remove_tracked_folder(self, folder_id: str) -> bool:
        """Remove a folder and its change history. Returns False if unknown."""
        with self._session() as session:
            row = _find_folder(session, folder_id)
            if row is None:
                return False
            session.query(FolderChangeRow).filter(
                FolderChangeRow.tracked_folder_id == row.id
            ).delete(synchronize_session=False)
            session.delete(row)
            return True

    # ----------------------------
    # Snapshots
    # ----------------------------
    def get_snapshot(self, folder_id: str) -> Optional[Snapshot]:
        """Return the stored snapshot, or None before the first baseline."""
        with self._session() as session:
            row = _find_folder(session, folder_id)
            if row is None or row.folder_contents is None:
                return None
            return Snapshot.from_list(folder_id, row.folder_contents)

    def save_snapshot(self, folder_id: str, folder_name: str, snapshot: Snapshot) -> int:
        """
        Store snapshot as the folder's latest, creating the record if needed.

        Also refreshes folder size, item count, owner and last_checked.

        Returns:
            The tracked folder's row id.
        """
        with self._session() as session:
            return self._write_snapshot(session, folder_id, folder_name, snapshot).id

    def save_check(
        self,
        folder_id: str,
        folder_name: str,
        snapshot: Snapshot,
        changes: Iterable[tuple[Change, str]],
    ) -> int:
        """
        Store a check's snapshot and its (change, parent name) pairs together.

        Both land in one transaction: if any change fails to insert, the
        previous snapshot stays in place so the next check detects the same
        changes again.

        Returns:
            Number of changes recorded (duplicates within the window excluded).
        """
        with self._session() as session:
            folder = self._write_snapshot(session, folder_id, folder_name, snapshot)
            recorded = 0
            for change, parent_name in changes:
                if self._insert_change(session, folder, change, parent_name):
                    recorded += 1
            return recorded

    # ----------------------------
    # Change log
    # ----------------------------
    def has_recent_change(
        self,
        folder_id: str,
        change_type: str,
        item_name: str,
        parent_name: str,
    ) -> bool:
        with self._session() as session:
            return self._has_recent_change(session, folder_id, change_type, item_name, parent_name)

    def record_change(
        self,
        folder_id: str,
        change: Change,
        parent_name: str,
        additional_data: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        File one change for a tracked folder.

        Returns:
            False if it was dropped as a duplicate, True if recorded.

        Raises:
            InvalidStateError: if the folder is not tracked.
        """
        with self._session() as session:
            folder = _find_folder(session, folder_id)
            if folder is None:
                raise InvalidStateError(
                    "Folder is not tracked",
                    details={"folder_id": folder_id},
                )
            return self._insert_change(session, folder, change, parent_name, additional_data)

    def list_changes(self, folder_id: str) -> list[ChangeRecord]:
        """Change history of a folder, newest first."""
        with self._session() as session:
            rows = (
                session.query(FolderChangeRow)
                .filter(FolderChangeRow.google_folder_id == folder_id)
                .order_by(FolderChangeRow.created_at.desc(), FolderChangeRow.id.desc())
                .all()
            )
            return [_to_change_record(row) for row in rows]

    # ----------------------------
    # Internals
    # ----------------------------
    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _has_recent_change(
        self,
        session: Session,
        folder_id: str,
        change_type: str,
        item_name: str,
        parent_name: str,
    ) -> bool:
        since = self._clock() - self._duplicate_window
        match = (
            session.query(FolderChangeRow.id)
            .filter(
                FolderChangeRow.google_folder_id == folder_id,
                FolderChangeRow.change_type == change_type,
                FolderChangeRow.item_name == item_name,
                FolderChangeRow.parent_name == parent_name,
                FolderChangeRow.created_at > since,
            )
            .first()
        )
        return match is not None

    def _write_snapshot(
        self,
        session: Session,
        folder_id: str,
        folder_name: str,
        snapshot: Snapshot,
    ) -> TrackedFolderRow:
        row = _find_folder(session, folder_id)
        if row is None:
            row = TrackedFolderRow(
                google_folder_id=folder_id,
                folder_name=folder_name,
                created_at=self._clock(),
                is_active=True,
            )
            session.add(row)

        row.folder_name = folder_name
        row.folder_contents = snapshot.to_list()
        row.folder_size = snapshot.total_size
        row.total_items = len(snapshot)
        row.owner_email = snapshot.owner_email
        row.last_checked = self._clock()
        session.flush()
        return row

    def _insert_change(
        self,
        session: Session,
        folder: TrackedFolderRow,
        change: Change,
        parent_name: str,
        additional_data: Optional[dict[str, Any]] = None,
    ) -> bool:
        item = change.item
        change_type = change.type.value
        folder_id = folder.google_folder_id

        if self._has_recent_change(session, folder_id, change_type, item.name, parent_name):
            logger.debug("Skipping duplicate change: %s - %s", change_type, item.name)
            return False

        details = change.details.to_dict() if isinstance(change, Modified) else None
        session.add(
            FolderChangeRow(
                tracked_folder_id=folder.id,
                google_folder_id=folder_id,
                change_type=change_type,
                item_name=item.name,
                parent_name=parent_name,
                item_id=item.id,
                mime_type=item.mime_type,
                modified_time=parse_rfc3339_or_none(item.modified_time),
                size=item.size_or_zero,
                full_path=item.full_path,
                created_at=self._clock(),
                additional_data=additional_data or {},
                modification_details=details,
            )
        )
        # Later changes of the same check must see this row for deduplication.
        session.flush()
        return True


def _find_folder(session: Session, folder_id: str) -> Optional[TrackedFolderRow]:
    return (
        session.query(TrackedFolderRow)
        .filter(TrackedFolderRow.google_folder_id == folder_id)
        .first()
    )


def _optional_utc(value: Optional[datetime]) -> Optional[datetime]:
    return as_utc(value) if value is not None else None


def _to_tracked_folder(row: TrackedFolderRow) -> TrackedFolder:
    snapshot = None
    if row.folder_contents is not None:
        snapshot = Snapshot.from_list(row.google_folder_id, row.folder_contents)

    return TrackedFolder(
        folder_id=row.google_folder_id,
        folder_name=row.folder_name,
        is_active=bool(row.is_active),
        snapshot=snapshot,
        last_checked=_optional_utc(row.last_checked),
        created_at=_optional_utc(row.created_at),
        owner_email=row.owner_email,
        folder_size=row.folder_size or 0,
        total_items=row.total_items or 0,
    )


def _to_change_record(row: FolderChangeRow) -> ChangeRecord:
    return ChangeRecord(
        folder_id=row.google_folder_id,
        change_type=row.change_type,
        item_name=row.item_name,
        parent_name=row.parent_name,
        item_id=row.item_id,
        full_path=row.full_path,
        mime_type=row.mime_type,
        modified_time=_optional_utc(row.modified_time),
        size=row.size or 0,
        modification_details=row.modification_details,
        additional_data=dict(row.additional_data or {}),
        created_at=_optional_utc(row.created_at),
        record_id=row.id,
    )
