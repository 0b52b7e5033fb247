"""Modification classification for items whose modified time changed."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from gdrivewatch.errors import GDriveWatchError
from gdrivewatch.models import Item, ModificationDetails, RevisionInfo
from gdrivewatch.util.mime import is_google_doc

logger = logging.getLogger(__name__)


class RevisionSource(Protocol):
    def get_revision_info(self, file_id: str) -> RevisionInfo: ...


class ModificationClassifier:
    """
    Build ModificationDetails from the current and previous version of an item.

    Without a revision source the classification is a pure function of the
    two items. With one, Google Docs additionally get revision metadata;
    failing to fetch it is logged and the field is left out.
    """

    def __init__(self, revision_source: Optional[RevisionSource] = None) -> None:
        self._revision_source = revision_source

    def classify(self, current: Item, previous: Item) -> ModificationDetails:
        previous_size = previous.size_or_zero
        new_size = current.size_or_zero

        revision_info = None
        if self._revision_source is not None and is_google_doc(current.mime_type):
            revision_info = self._fetch_revision_info(current)

        return ModificationDetails(
            previous_modified_time=previous.modified_time,
            new_modified_time=current.modified_time,
            previous_size=previous_size,
            new_size=new_size,
            size_delta=new_size - previous_size,
            revision_info=revision_info,
        )

    def _fetch_revision_info(self, item: Item) -> Optional[RevisionInfo]:
        try:
            return self._revision_source.get_revision_info(item.id)  # type: ignore[union-attr]
        except GDriveWatchError as exc:
            logger.warning("Could not fetch revision details for %s: %s", item.name, exc)
            return None
