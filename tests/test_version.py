import unittest

from gitscribe.version import Version, VersionDesignation, VersionError


class TestVersion(unittest.TestCase):
    def test_parse(self) -> None:
        version = Version.parse("0.0.1")
        self.assertEqual((version.major, version.minor, version.patch), (0, 0, 1))
        self.assertEqual(str(Version.parse(" 12.3.45 ")), "12.3.45")

    def test_parse_invalid(self) -> None:
        for text in ("1.0", "1.0.0.0", "v1.0.0", "1.0.0-rc1", "a.b.c", "", "\u0661.\u0660.\u0660"):
            with self.subTest(text=text):
                with self.assertRaises(VersionError):
                    Version.parse(text)

    def test_bump(self) -> None:
        cases = [
            ("0.0.1", VersionDesignation.PATCH, "0.0.2"),
            ("1.0.4", VersionDesignation.MINOR, "1.1.0"),
            ("0.1.1", VersionDesignation.MAJOR, "1.0.0"),
            ("1.9.9", VersionDesignation.PATCH, "1.9.10"),
        ]
        for start, designation, expected in cases:
            with self.subTest(start=start, designation=designation):
                self.assertEqual(str(Version.parse(start).bump(designation)), expected)

    def test_designation_values(self) -> None:
        self.assertEqual([str(d) for d in VersionDesignation], ["major", "minor", "patch"])


if __name__ == "__main__":
    unittest.main()
