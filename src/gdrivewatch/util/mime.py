from __future__ import annotations

FOLDER_MIME: str = "application/vnd.google-apps.folder"

# Only Google Docs carry revision metadata worth attaching to a modification.
GOOGLE_DOC_MIME: str = "application/vnd.google-apps.document"


def is_folder(mime_type: str | None) -> bool:
    return mime_type == FOLDER_MIME


def is_google_doc(mime_type: str | None) -> bool:
    """Returns True if revision metadata should be fetched for this MIME type."""
    return mime_type == GOOGLE_DOC_MIME
