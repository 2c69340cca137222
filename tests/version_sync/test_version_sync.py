import json
import tempfile
import unittest
from pathlib import Path

import tomlkit
import yaml

from gitscribe.version_sync.sync import (
    SyncFileFormat,
    VersionSyncError,
    VersionSyncFile,
    sync_version_file,
    sync_version_to_files,
)

CARGO_TOML = """\
# workspace crate
[package]
name = "widgets"
version = "0.1.0"  # bumped by gitscribe

[dependencies]
serde = "1"
"""

POETRY_TOML = """\
[tool.poetry]
name = "widgets"
version = "0.1.0"

[tool.black]
line-length = 100
"""


class TestVersionSync(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_json(self) -> None:
        (self.root / "package.json").write_text(json.dumps({"name": "widgets", "version": "0.1.0"}))
        sync_version_file(VersionSyncFile(SyncFileFormat.JSON, "package.json"), "0.2.0", self.root)
        data = json.loads((self.root / "package.json").read_text())
        self.assertEqual(data, {"name": "widgets", "version": "0.2.0"})

    def test_json_adds_missing_key(self) -> None:
        (self.root / "app.json").write_text("{}")
        sync_version_file(VersionSyncFile(SyncFileFormat.JSON, "app.json", "appVersion"), "1.0.0", self.root)
        self.assertEqual(json.loads((self.root / "app.json").read_text()), {"appVersion": "1.0.0"})

    def test_cargo_toml_keeps_comments(self) -> None:
        (self.root / "Cargo.toml").write_text(CARGO_TOML)
        sync_version_file(VersionSyncFile(SyncFileFormat.CARGO_TOML, "Cargo.toml"), "0.2.0", self.root)
        text = (self.root / "Cargo.toml").read_text()
        self.assertEqual(tomlkit.parse(text)["package"]["version"], "0.2.0")
        self.assertIn("# workspace crate", text)
        self.assertIn('serde = "1"', text)

    def test_poetry_toml(self) -> None:
        (self.root / "pyproject.toml").write_text(POETRY_TOML)
        sync_version_file(VersionSyncFile(SyncFileFormat.POETRY_TOML, "pyproject.toml"), "1.0.0", self.root)
        document = tomlkit.parse((self.root / "pyproject.toml").read_text())
        self.assertEqual(document["tool"]["poetry"]["version"], "1.0.0")
        self.assertEqual(document["tool"]["black"]["line-length"], 100)

    def test_yaml(self) -> None:
        (self.root / "chart.yaml").write_text("name: widgets\nversion: 0.1.0\nimage: {tag: latest}\n")
        sync_version_file(VersionSyncFile(SyncFileFormat.YAML, "chart.yaml"), "0.3.0", self.root)
        data = yaml.safe_load((self.root / "chart.yaml").read_text())
        self.assertEqual(data["version"], "0.3.0")
        self.assertEqual(data["image"], {"tag": "latest"})
        self.assertEqual(list(data), ["name", "version", "image"])

    def test_missing_table(self) -> None:
        (self.root / "Cargo.toml").write_text('[workspace]\nmembers = ["a"]\n')
        with self.assertRaises(VersionSyncError) as ctx:
            sync_version_file(VersionSyncFile(SyncFileFormat.CARGO_TOML, "Cargo.toml"), "0.2.0", self.root)
        self.assertIn("[package]", str(ctx.exception))

    def test_missing_file(self) -> None:
        with self.assertRaises(VersionSyncError):
            sync_version_file(VersionSyncFile(SyncFileFormat.JSON, "nope.json"), "0.2.0", self.root)

    def test_unparsable_files(self) -> None:
        cases = [
            ("bad.json", SyncFileFormat.JSON, "{not json"),
            ("list.json", SyncFileFormat.JSON, "[1, 2]"),
            ("bad.toml", SyncFileFormat.CARGO_TOML, "[package\nversion="),
            ("bad.yaml", SyncFileFormat.YAML, "key: [unclosed"),
            ("scalar.yaml", SyncFileFormat.YAML, "just a string"),
        ]
        for name, fmt, content in cases:
            with self.subTest(file=name):
                (self.root / name).write_text(content)
                with self.assertRaises(VersionSyncError):
                    sync_version_file(VersionSyncFile(fmt, name), "0.2.0", self.root)

    def test_sync_many_returns_paths(self) -> None:
        (self.root / "package.json").write_text("{}")
        (self.root / "chart.yaml").write_text("version: 0.0.1\n")
        paths = sync_version_to_files(
            [
                VersionSyncFile(SyncFileFormat.JSON, "package.json"),
                VersionSyncFile(SyncFileFormat.YAML, "chart.yaml"),
            ],
            "0.0.2",
            self.root,
        )
        self.assertEqual(paths, [self.root / "package.json", self.root / "chart.yaml"])


if __name__ == "__main__":
    unittest.main()
