"""Folder reference parsing (Drive URLs and bare ids)."""

from __future__ import annotations

import re

from gdrivewatch.errors import InvalidReferenceError

# Tried in order; the first match wins.
_FOLDER_ID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/folders/([a-zA-Z0-9_-]+)"),
    re.compile(r"[?&]id=([a-zA-Z0-9_-]+)"),
    re.compile(r"^([a-zA-Z0-9_-]+)$"),
)


def extract_folder_id(reference: str) -> str:
    """
    Extract a Drive folder id from a folder URL or a bare id.

    Accepted forms:
        - https://drive.google.com/drive/folders/<id>?usp=sharing
        - https://drive.google.com/open?id=<id>
        - <id>

    Raises:
        InvalidReferenceError: if no usable identifier can be found.
    """
    if not isinstance(reference, str) or not reference.strip():
        raise InvalidReferenceError("Folder reference must be a non-empty string")

    value = reference.strip()
    for pattern in _FOLDER_ID_PATTERNS:
        match = pattern.search(value)
        if match:
            return match.group(1)

    raise InvalidReferenceError(
        "Invalid Google Drive folder reference",
        details={"reference": reference},
    )
