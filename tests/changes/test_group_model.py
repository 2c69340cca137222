import unittest

from commit_factories import feature, fix

from gitscribe.changes.errors import InconsistentVersionState
from gitscribe.changes.group_model import ChangeCategory, ChangeGroup, CommitRecord


class TestCommitRecord(unittest.TestCase):
    def test_record_is_immutable(self) -> None:
        record = feature("abcdef1234567890", "2024-01-01T00:00:00Z")
        with self.assertRaises(AttributeError):
            record.message = "changed"  # type: ignore[misc]

    def test_short_id(self) -> None:
        self.assertEqual(feature("abcdef1234567890", "2024-01-01T00:00:00Z").short_id, "abcdef1")

    def test_category_renders_as_label(self) -> None:
        self.assertEqual(str(ChangeCategory.FEATURE), "Feature")
        self.assertEqual(f"{ChangeCategory.FIX}", "Fix")


class TestChangeGroup(unittest.TestCase):
    def test_keys_keep_insertion_order(self) -> None:
        group = ChangeGroup()
        for version in ("2.0.0", "10.0.0", "1.0.0"):
            group.add_release(version)
        self.assertEqual(list(group), ["2.0.0", "10.0.0", "1.0.0"])
        self.assertEqual(list(group.keys()), ["2.0.0", "10.0.0", "1.0.0"])

    def test_append_and_lookup(self) -> None:
        group = ChangeGroup()
        group.add_release("1.0.0")
        first = feature("a", "2024-01-01T00:00:00Z")
        second = fix("b", "2024-01-02T00:00:00Z")
        group.append("1.0.0", first)
        group.append("1.0.0", second)
        self.assertEqual(group["1.0.0"], [first, second])
        self.assertIn("1.0.0", group)
        self.assertEqual(len(group), 1)
        self.assertEqual(group.total_changes(), 2)
        self.assertEqual(list(group.items()), [("1.0.0", [first, second])])

    def test_append_to_unknown_version(self) -> None:
        group = ChangeGroup()
        with self.assertRaises(InconsistentVersionState):
            group.append("9.9.9", feature("a", "2024-01-01T00:00:00Z"))

    def test_re_adding_a_release_keeps_position_and_changes(self) -> None:
        group = ChangeGroup()
        group.add_release("2.0.0")
        group.add_release("1.0.0")
        change = fix("a", "2024-01-01T00:00:00Z")
        group.append("2.0.0", change)
        group.add_release("2.0.0")
        self.assertEqual(list(group), ["2.0.0", "1.0.0"])
        self.assertEqual(group["2.0.0"], [change])

    def test_missing_key(self) -> None:
        with self.assertRaises(KeyError):
            ChangeGroup()["1.0.0"]

    def test_empty_group(self) -> None:
        group = ChangeGroup()
        self.assertEqual(len(group), 0)
        self.assertEqual(list(group), [])
        self.assertIsInstance(repr(group), str)


if __name__ == "__main__":
    unittest.main()
