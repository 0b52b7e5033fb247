"""Field definitions for Google Drive API responses."""

from __future__ import annotations

ITEM_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "modifiedTime,"
    "parents,"
    "size,"
    "owners"
)

LIST_FIELDS: str = f"nextPageToken,files({ITEM_FIELDS})"

FILE_FIELDS: str = "id,name,mimeType,parents,owners"

PARENT_FIELDS: str = "parents"

NAME_FIELDS: str = "name"

REVISION_FIELDS: str = "nextPageToken,revisions(id,modifiedTime,lastModifyingUser)"

LIST_PAGE_SIZE: int = 1000
