"""SQLAlchemy tables backing the change ledger."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TrackedFolderRow(Base):
    """One tracked folder and its most recent snapshot (JSON list of items)."""

    __tablename__ = "tracked_folders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    google_folder_id = Column(String, unique=True, nullable=False)
    folder_name = Column(String, nullable=False)
    last_checked = Column(DateTime(timezone=True), nullable=True)
    folder_contents = Column(JSON, nullable=True)  # NULL until the first baseline
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    owner_email = Column(String, nullable=True)
    folder_size = Column(BigInteger, nullable=False, default=0)
    total_items = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)


class FolderChangeRow(Base):
    """Append-only log of changes filed for a tracked folder."""

    __tablename__ = "folder_changes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tracked_folder_id = Column(
        Integer,
        ForeignKey("tracked_folders.id", ondelete="CASCADE"),
        nullable=False,
    )
    google_folder_id = Column(String, nullable=False)
    change_type = Column(String, nullable=False)
    item_name = Column(String, nullable=False)
    parent_name = Column(String, nullable=False)
    item_id = Column(String, nullable=False)
    mime_type = Column(String, nullable=True)
    modified_time = Column(DateTime(timezone=True), nullable=True)
    size = Column(BigInteger, nullable=False, default=0)
    full_path = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    additional_data = Column(JSON, nullable=False, default=dict)
    modification_details = Column(JSON, nullable=True)

    __table_args__ = (
        # Duplicate-suppression lookup.
        Index(
            "idx_folder_changes_dedup",
            "google_folder_id",
            "change_type",
            "item_name",
            "parent_name",
            "created_at",
        ),
    )
