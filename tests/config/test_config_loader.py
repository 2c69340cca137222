import json
import tempfile
import unittest
from pathlib import Path

from gitscribe.changelog.renderer import TemplateOption
from gitscribe.config.loader import (
    CONFIG_FILE_NAME,
    ConfigError,
    create_default_config,
    load_config,
    parse_config,
    save_config,
)
from gitscribe.version_sync.sync import SyncFileFormat


def _valid_config(**overrides):
    data = {
        "version": "1.2.3",
        "changelog_output_selections": [
            {"template_option": "Markdown", "output_filepath": "CHANGELOG.md"}
        ],
        "project_repo": "https://github.com/acme/widgets",
        "version_sync_files": [
            {"file_format": "Json", "file_path": "package.json", "version_key": "version"}
        ],
        "branch_for_release": True,
        "commands_that_release": ["major", "minor"],
    }
    data.update(overrides)
    return data


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def test_load_config_success(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / CONFIG_FILE_NAME).write_text(json.dumps(_valid_config()))
            config = load_config(root)
        self.assertEqual(config.version, "1.2.3")
        self.assertEqual(config.project_repo, "https://github.com/acme/widgets")
        self.assertEqual(config.changelog_output_selections[0].template_option, TemplateOption.MARKDOWN)
        self.assertEqual(config.version_sync_files[0].file_format, SyncFileFormat.JSON)
        self.assertTrue(config.branch_for_release)
        self.assertEqual(config.commands_that_release, ["major", "minor"])

    def test_optional_keys_default(self) -> None:
        config = parse_config(
            {
                "version": "0.0.1",
                "changelog_output_selections": [],
            }
        )
        self.assertIsNone(config.project_repo)
        self.assertIsNone(config.version_sync_files)
        self.assertFalse(config.branch_for_release)
        self.assertEqual(config.commands_that_release, [])

    def test_empty_project_repo_is_none(self) -> None:
        self.assertIsNone(parse_config(_valid_config(project_repo="")).project_repo)

    def test_version_key_defaults_to_version(self) -> None:
        config = parse_config(
            _valid_config(version_sync_files=[{"file_format": "Yaml", "file_path": "chart.yaml"}])
        )
        self.assertEqual(config.version_sync_files[0].version_key, "version")

    def test_load_config_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ConfigError) as ctx:
                load_config(Path(tmp))
        self.assertIn("gitscribe init", str(ctx.exception))

    def test_load_config_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / CONFIG_FILE_NAME).write_text("{invalid}")
            with self.assertRaises(ConfigError) as ctx:
                load_config(root)
        self.assertIn("Invalid JSON", str(ctx.exception))

    def test_load_config_missing_keys(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            parse_config({"version": "1.0.0"})
        self.assertIn("changelog_output_selections", str(ctx.exception))

    def test_invalid_values(self) -> None:
        cases = [
            ([], "JSON object"),
            (_valid_config(version=1), "'version' must be a string"),
            (_valid_config(version="1.0"), "'version' is invalid"),
            (_valid_config(changelog_output_selections={}), "must be a list"),
            (_valid_config(changelog_output_selections=["x"]), "entries must be objects"),
            (
                _valid_config(changelog_output_selections=[{"template_option": "Html", "output_filepath": "a"}]),
                "'template_option' must be one of",
            ),
            (
                _valid_config(changelog_output_selections=[{"template_option": "Markdown"}]),
                "'output_filepath'",
            ),
            (_valid_config(project_repo=5), "'project_repo'"),
            (_valid_config(version_sync_files="package.json"), "'version_sync_files'"),
            (
                _valid_config(version_sync_files=[{"file_format": "Ini", "file_path": "a"}]),
                "'file_format' must be one of",
            ),
            (
                _valid_config(version_sync_files=[{"file_format": "Json", "file_path": ""}]),
                "'file_path'",
            ),
            (_valid_config(branch_for_release="yes"), "'branch_for_release'"),
            (_valid_config(commands_that_release=["hotfix"]), "'commands_that_release'"),
        ]
        for data, expected in cases:
            with self.subTest(expected=expected):
                with self.assertRaises(ConfigError) as ctx:
                    parse_config(data)
                self.assertIn(expected, str(ctx.exception))


class TestSaveConfig(unittest.TestCase):
    def test_save_and_reload(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            original = parse_config(_valid_config())
            path = save_config(original, root)
            self.assertEqual(path, root / CONFIG_FILE_NAME)
            self.assertEqual(json.loads(path.read_text()), _valid_config())
            self.assertEqual(load_config(root), original)

    def test_create_refuses_to_overwrite(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / CONFIG_FILE_NAME).write_text("{}")
            with self.assertRaises(ConfigError):
                save_config(create_default_config(), root, create=True)
            self.assertEqual((root / CONFIG_FILE_NAME).read_text(), "{}")

    def test_default_config(self) -> None:
        config = create_default_config()
        self.assertEqual(config.version, "0.0.1")
        self.assertEqual(len(config.changelog_output_selections), 1)
        self.assertEqual(config.changelog_output_selections[0].output_filepath, "CHANGELOG.md")
        self.assertEqual(config.to_dict()["changelog_output_selections"][0]["template_option"], "Markdown")


if __name__ == "__main__":
    unittest.main()
