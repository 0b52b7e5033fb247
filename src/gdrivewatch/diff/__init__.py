"""Change detection exports for gdrivewatch."""

from __future__ import annotations

from .classifier import ModificationClassifier, RevisionSource
from .detector import RENAME_THRESHOLD, ChangeDetector, detect_changes
from .similarity import name_similarity, normalize_name

__all__ = [
    "ChangeDetector",
    "detect_changes",
    "RENAME_THRESHOLD",
    "ModificationClassifier",
    "RevisionSource",
    "name_similarity",
    "normalize_name",
]
