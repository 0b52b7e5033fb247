import unittest
from unittest.mock import Mock

from gdrivewatch.diff import ChangeDetector, ModificationClassifier, detect_changes
from gdrivewatch.models import (
    Added,
    ChangeType,
    Item,
    Modified,
    Moved,
    Removed,
    Renamed,
    RevisionInfo,
    Snapshot,
)
from gdrivewatch.util.mime import FOLDER_MIME, GOOGLE_DOC_MIME


def _item(item_id, name, **kwargs) -> Item:
    kwargs.setdefault("mime_type", "text/plain")
    kwargs.setdefault("size", 10)
    kwargs.setdefault("parent_id", "root")
    kwargs.setdefault("modified_time", "2025-01-01T00:00:00.000Z")
    return Item(id=item_id, name=name, **kwargs)


def _snap(*items: Item) -> Snapshot:
    return Snapshot(root_id="root", items=tuple(items))


class TestDetectorBaseline(unittest.TestCase):
    def test_no_previous_snapshot_reports_nothing(self) -> None:
        current = _snap(_item("1", "a.txt"), _item("2", "b.txt"))
        self.assertEqual(detect_changes(current, None), [])

    def test_empty_previous_snapshot_is_first_observation(self) -> None:
        current = _snap(_item("A", "a.txt"))
        self.assertEqual(detect_changes(current, _snap()), [])

    def test_identical_snapshots_report_nothing(self) -> None:
        snap = _snap(
            _item("F", "docs", mime_type=FOLDER_MIME, size=None),
            _item("1", "a.txt", parent_id="F"),
            _item("2", "b.txt"),
        )
        self.assertEqual(detect_changes(snap, snap), [])


class TestDetectorClassification(unittest.TestCase):
    def test_added_and_removed(self) -> None:
        previous = _snap(_item("1", "old.txt", size=5))
        current = _snap(_item("2", "completely different.pdf", size=7))

        changes = detect_changes(current, previous)

        self.assertEqual([c.type for c in changes], [ChangeType.ADDED, ChangeType.REMOVED])
        self.assertIsInstance(changes[0], Added)
        self.assertEqual(changes[0].item.id, "2")
        self.assertIsInstance(changes[1], Removed)
        self.assertEqual(changes[1].item.id, "1")

    def test_modified_reports_size_delta(self) -> None:
        previous = _snap(_item("1", "x.txt", mime_type="text", size=10, modified_time="T1"))
        current = _snap(_item("1", "x.txt", mime_type="text", size=20, modified_time="T2"))

        changes = detect_changes(current, previous)

        self.assertEqual(len(changes), 1)
        change = changes[0]
        self.assertIsInstance(change, Modified)
        self.assertEqual(change.details.size_delta, 10)
        self.assertEqual(change.details.previous_modified_time, "T1")
        self.assertEqual(change.details.new_modified_time, "T2")
        self.assertEqual(change.details.previous_size, 10)
        self.assertEqual(change.details.new_size, 20)

    def test_missing_sizes_count_as_zero(self) -> None:
        previous = _snap(_item("1", "doc", size=None, modified_time="T1"))
        current = _snap(_item("1", "doc", size=42, modified_time="T2"))

        (change,) = detect_changes(current, previous)
        self.assertEqual(change.details.previous_size, 0)
        self.assertEqual(change.details.size_delta, 42)

    def test_move_without_modification_is_one_moved_change(self) -> None:
        previous = _snap(
            _item("A", "a", mime_type=FOLDER_MIME, size=None),
            _item("B", "b", mime_type=FOLDER_MIME, size=None),
            _item("1", "x.txt", parent_id="A"),
        )
        current = _snap(
            _item("A", "a", mime_type=FOLDER_MIME, size=None),
            _item("B", "b", mime_type=FOLDER_MIME, size=None),
            _item("1", "x.txt", parent_id="B"),
        )

        changes = detect_changes(current, previous)

        self.assertEqual(len(changes), 1)
        self.assertIsInstance(changes[0], Moved)
        self.assertEqual(changes[0].old_parent_id, "A")
        self.assertEqual(changes[0].new_parent_id, "B")

    def test_modified_and_moved_are_separate_entries(self) -> None:
        previous = _snap(_item("1", "x.txt", parent_id="A", modified_time="T1"))
        current = _snap(_item("1", "x.txt", parent_id="B", modified_time="T2"))

        changes = detect_changes(current, previous)

        self.assertEqual([c.type for c in changes], [ChangeType.MODIFIED, ChangeType.MOVED])

    def test_pure_rename_with_same_id_and_time_is_invisible(self) -> None:
        previous = _snap(_item("1", "draft.txt"))
        current = _snap(_item("1", "final.txt"))

        self.assertEqual(detect_changes(current, previous), [])

    def test_rename_with_same_id_and_time_bump_is_modified_only(self) -> None:
        previous = _snap(_item("1", "draft.txt", modified_time="T1"))
        current = _snap(_item("1", "final.txt", modified_time="T2"))

        changes = detect_changes(current, previous)

        self.assertEqual([c.type for c in changes], [ChangeType.MODIFIED])


class TestDetectorRenames(unittest.TestCase):
    def test_new_id_with_similar_name_is_single_rename(self) -> None:
        previous = _snap(_item("old", "Quarterly Report.docx", size=100))
        current = _snap(_item("new", "Quarterly Reports.docx", size=100))

        changes = detect_changes(current, previous)

        self.assertEqual(len(changes), 1)
        change = changes[0]
        self.assertIsInstance(change, Renamed)
        self.assertEqual(change.old_name, "Quarterly Report.docx")
        self.assertEqual(change.old_id, "old")
        self.assertGreater(change.similarity, 0.8)

    def test_single_character_deletion_is_rename(self) -> None:
        previous = _snap(_item("1", "banana.txt"))
        current = _snap(_item("2", "baana.txt"))

        (change,) = detect_changes(current, previous)

        self.assertIsInstance(change, Renamed)
        self.assertEqual(change.old_id, "1")
        self.assertAlmostEqual(change.similarity, 5 / 6)

    def test_drive_copy_name_is_rename(self) -> None:
        previous = _snap(_item("old", "Report.docx", size=100))
        current = _snap(_item("new", "Report (1).docx", size=100))

        (change,) = detect_changes(current, previous)
        self.assertIsInstance(change, Renamed)

    def test_size_mismatch_prevents_rename(self) -> None:
        previous = _snap(_item("old", "Quarterly Report.docx", size=100))
        current = _snap(_item("new", "Quarterly Reports.docx", size=101))

        changes = detect_changes(current, previous)

        self.assertEqual([c.type for c in changes], [ChangeType.ADDED, ChangeType.REMOVED])

    def test_mime_mismatch_prevents_rename(self) -> None:
        previous = _snap(_item("old", "Quarterly Report", mime_type="text/plain"))
        current = _snap(_item("new", "Quarterly Reports", mime_type="application/pdf"))

        changes = detect_changes(current, previous)

        self.assertEqual([c.type for c in changes], [ChangeType.ADDED, ChangeType.REMOVED])

    def test_first_qualifying_candidate_wins_over_best_score(self) -> None:
        # "budget 2024 v" scores lower than "budget 2024 v2" but comes first.
        previous = _snap(
            _item("p1", "budget 2024 v.xlsx"),
            _item("p2", "budget 2024 v2.xlsx"),
        )
        current = _snap(_item("c1", "budget 2024 v2b.xlsx"))

        changes = detect_changes(current, previous)

        renamed = [c for c in changes if isinstance(c, Renamed)]
        self.assertEqual(len(renamed), 1)
        self.assertEqual(renamed[0].old_id, "p1")
        removed = [c.item.id for c in changes if isinstance(c, Removed)]
        self.assertEqual(removed, ["p2"])

    def test_rename_source_is_consumed_once(self) -> None:
        previous = _snap(_item("p1", "meeting notes.txt"))
        current = _snap(
            _item("c1", "meeting notes1.txt"),
            _item("c2", "meeting notes2.txt"),
        )

        changes = detect_changes(current, previous)

        self.assertEqual([c.type for c in changes], [ChangeType.RENAMED, ChangeType.ADDED])
        self.assertEqual(changes[0].item.id, "c1")
        self.assertEqual(changes[1].item.id, "c2")

    def test_items_still_present_are_not_rename_sources(self) -> None:
        previous = _snap(_item("p1", "notes.txt"))
        current = _snap(_item("p1", "notes.txt"), _item("c1", "notes1.txt"))

        changes = detect_changes(current, previous)

        self.assertEqual(len(changes), 1)
        self.assertIsInstance(changes[0], Added)

    def test_custom_threshold(self) -> None:
        previous = _snap(_item("old", "abcd.txt"))
        current = _snap(_item("new", "abcx.txt"))

        strict = detect_changes(current, previous)
        lenient = detect_changes(current, previous, rename_threshold=0.5)

        self.assertEqual([c.type for c in strict], [ChangeType.ADDED, ChangeType.REMOVED])
        self.assertEqual([c.type for c in lenient], [ChangeType.RENAMED])


class TestDetectorOrdering(unittest.TestCase):
    def test_current_side_first_then_removals_in_previous_order(self) -> None:
        previous = _snap(
            _item("r1", "gone one.bin", size=1),
            _item("k", "keep.txt", modified_time="T1"),
            _item("r2", "gone two.bin", size=2),
        )
        current = _snap(
            _item("n", "brand new.md", size=3),
            _item("k", "keep.txt", modified_time="T2"),
        )

        changes = detect_changes(current, previous)

        self.assertEqual(
            [(c.type, c.item.id) for c in changes],
            [
                (ChangeType.ADDED, "n"),
                (ChangeType.MODIFIED, "k"),
                (ChangeType.REMOVED, "r1"),
                (ChangeType.REMOVED, "r2"),
            ],
        )


class TestDetectorWithRevisions(unittest.TestCase):
    def test_google_doc_modification_carries_revision_info(self) -> None:
        source = Mock()
        source.get_revision_info.return_value = RevisionInfo(
            last_revision={"id": "r3"}, revision_count=3
        )
        detector = ChangeDetector(ModificationClassifier(source))

        previous = _snap(_item("1", "Doc", mime_type=GOOGLE_DOC_MIME, size=None, modified_time="T1"))
        current = _snap(_item("1", "Doc", mime_type=GOOGLE_DOC_MIME, size=None, modified_time="T2"))

        (change,) = detector.detect(current, previous)

        source.get_revision_info.assert_called_once_with("1")
        self.assertEqual(change.details.revision_info.revision_count, 3)


if __name__ == "__main__":
    unittest.main()
