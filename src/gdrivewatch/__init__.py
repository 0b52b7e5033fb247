"""gdrivewatch public API."""

from __future__ import annotations

from gdrivewatch.auth import AuthInfo, OAuthClient
from gdrivewatch.config import TrackerSettings, configure_logging
from gdrivewatch.controller import GoogleDriveController, RetryPolicy
from gdrivewatch.diff import (
    ChangeDetector,
    ModificationClassifier,
    detect_changes,
    name_similarity,
)
from gdrivewatch.errors import (
    AuthError,
    DetailFetchFailure,
    FatalSourceError,
    GDriveWatchError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidReferenceError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    SourceError,
    TransientSourceError,
    is_transient,
    map_http_error,
)
from gdrivewatch.ledger import ChangeLedger
from gdrivewatch.models import (
    Added,
    Change,
    ChangeRecord,
    ChangeType,
    CheckResult,
    Item,
    ModificationDetails,
    Modified,
    Moved,
    Removed,
    Renamed,
    RevisionInfo,
    Snapshot,
    TrackedFolder,
)
from gdrivewatch.snapshot import SnapshotBuilder, build_folder_structure, build_snapshot
from gdrivewatch.tracker import FolderTracker
from gdrivewatch.util.refs import extract_folder_id

__all__ = [
    # High-level
    "FolderTracker",
    "TrackerSettings",
    "configure_logging",
    "ChangeLedger",
    "GoogleDriveController",
    "RetryPolicy",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Core
    "SnapshotBuilder",
    "build_snapshot",
    "build_folder_structure",
    "ChangeDetector",
    "detect_changes",
    "ModificationClassifier",
    "name_similarity",
    "extract_folder_id",
    # Models
    "Item",
    "Snapshot",
    "ChangeType",
    "Change",
    "Added",
    "Removed",
    "Modified",
    "Moved",
    "Renamed",
    "ModificationDetails",
    "RevisionInfo",
    "TrackedFolder",
    "ChangeRecord",
    "CheckResult",
    # Errors
    "GDriveWatchError",
    "InvalidReferenceError",
    "InvalidStateError",
    "DetailFetchFailure",
    "SourceError",
    "TransientSourceError",
    "FatalSourceError",
    "RateLimitError",
    "NetworkError",
    "ServerError",
    "InvalidArgumentError",
    "AuthError",
    "PermissionError",
    "NotFoundError",
    "HttpErrorInfo",
    "map_http_error",
    "is_transient",
]
