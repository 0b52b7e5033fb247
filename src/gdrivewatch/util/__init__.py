from .mime import FOLDER_MIME, GOOGLE_DOC_MIME, is_folder, is_google_doc
from .refs import extract_folder_id
from .time import (
    as_utc,
    normalize_dt,
    now_utc,
    parse_rfc3339,
    parse_rfc3339_or_none,
    to_rfc3339,
)

__all__ = [
    "FOLDER_MIME",
    "GOOGLE_DOC_MIME",
    "is_folder",
    "is_google_doc",
    "extract_folder_id",
    "now_utc",
    "parse_rfc3339",
    "parse_rfc3339_or_none",
    "to_rfc3339",
    "normalize_dt",
    "as_utc",
]
