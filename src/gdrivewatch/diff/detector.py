"""Change detection between two snapshots of the same folder."""

from __future__ import annotations

from typing import Iterable, Optional

from gdrivewatch.models import Added, Change, Item, Modified, Moved, Removed, Renamed

from .classifier import ModificationClassifier
from .similarity import name_similarity

RENAME_THRESHOLD: float = 0.8


class ChangeDetector:
    """
    Compare a current snapshot against the previous one.

    Rules, in precedence order:
        - Items matched by id are `modified` when modified_time differs and,
          independently, `moved` when parent_id differs.
        - Current items without an id match are `renamed` if a rename source
          correlates (see _correlate_rename), else `added`.
        - Previous items without an id match are `removed`, unless consumed as
          a rename source.

    Output order: current-side changes in current order, then removals in
    previous order.
    """

    def __init__(
        self,
        classifier: Optional[ModificationClassifier] = None,
        *,
        rename_threshold: float = RENAME_THRESHOLD,
    ) -> None:
        self._classifier = classifier or ModificationClassifier()
        self._rename_threshold = rename_threshold

    def detect(
        self,
        current: Iterable[Item],
        previous: Optional[Iterable[Item]],
    ) -> list[Change]:
        """Return the changes from previous to current; [] without a baseline."""
        if previous is None:
            return []

        previous_by_id = {item.id: item for item in previous}
        if not previous_by_id:
            return []
        current_by_id = {item.id: item for item in current}

        rename_sources = [
            item for item in previous_by_id.values() if item.id not in current_by_id
        ]
        consumed: set[str] = set()
        changes: list[Change] = []

        for item in current_by_id.values():
            last = previous_by_id.get(item.id)

            if last is None:
                match = self._correlate_rename(item, rename_sources, consumed)
                if match is None:
                    changes.append(Added(item))
                else:
                    source, similarity = match
                    consumed.add(source.id)
                    changes.append(
                        Renamed(item, old_name=source.name, similarity=similarity, old_id=source.id)
                    )
                continue

            if item.modified_time != last.modified_time:
                changes.append(Modified(item, self._classifier.classify(item, last)))

            if item.parent_id != last.parent_id:
                changes.append(Moved(item, old_parent_id=last.parent_id, new_parent_id=item.parent_id))

        for last in rename_sources:
            if last.id not in consumed:
                changes.append(Removed(last))

        return changes

    def _correlate_rename(
        self,
        item: Item,
        candidates: list[Item],
        consumed: set[str],
    ) -> Optional[tuple[Item, float]]:
        """
        First candidate (in previous order) with equal mime_type and size whose
        name similarity exceeds the threshold. First match wins, not best
        score; a candidate already consumed by an earlier rename is skipped.
        """
        for candidate in candidates:
            if candidate.id in consumed:
                continue
            if candidate.mime_type != item.mime_type or candidate.size != item.size:
                continue
            similarity = name_similarity(item.name, candidate.name)
            if similarity > self._rename_threshold:
                return candidate, similarity
        return None


def detect_changes(
    current: Iterable[Item],
    previous: Optional[Iterable[Item]],
    *,
    classifier: Optional[ModificationClassifier] = None,
    rename_threshold: float = RENAME_THRESHOLD,
) -> list[Change]:
    """Functional form of ChangeDetector.detect."""
    detector = ChangeDetector(classifier, rename_threshold=rename_threshold)
    return detector.detect(current, previous)
