"""
Configuration loader for gitscribe.

The tool expects a JSON configuration file named ``gitscribe.json`` in the
repository root. It stores the current version of the project together
with the changelog outputs to generate, the optional repository URL used
for commit links, the manifest files to keep in step with the version and
the release branch policy.

If the configuration file is missing, malformed, or missing required
keys, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from gitscribe.changelog.renderer import TemplateOption
from gitscribe.version import Version, VersionDesignation, VersionError
from gitscribe.version_sync.sync import SyncFileFormat, VersionSyncFile

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

CONFIG_FILE_NAME = "gitscribe.json"


class ConfigError(Exception):
    """Raised when the gitscribe configuration file is missing or invalid."""

    pass


@dataclass
class ChangelogOutputOption:
    """A changelog to generate: which template, and where to write it."""

    template_option: TemplateOption
    output_filepath: str


@dataclass
class GitscribeConfig:
    """Contents of ``gitscribe.json``.

    Attributes
    ----------
    version : str
        The current version of the project.
    changelog_output_selections : List[ChangelogOutputOption]
        Changelogs generated on every release.
    project_repo : Optional[str]
        Repository URL used to link commits in the changelog.
    version_sync_files : Optional[List[VersionSyncFile]]
        Manifest files whose version key follows ``version``.
    branch_for_release : bool
        Whether releasing commands create a ``release/`` branch.
    commands_that_release : List[str]
        Which of ``major``, ``minor`` and ``patch`` count as releases.
    """

    version: str
    changelog_output_selections: List[ChangelogOutputOption]
    project_repo: Optional[str] = None
    version_sync_files: Optional[List[VersionSyncFile]] = None
    branch_for_release: bool = False
    commands_that_release: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "changelog_output_selections": [
                {
                    "template_option": str(selection.template_option),
                    "output_filepath": selection.output_filepath,
                }
                for selection in self.changelog_output_selections
            ],
            "project_repo": self.project_repo,
            "version_sync_files": None
            if self.version_sync_files is None
            else [
                {
                    "file_format": str(sync_file.file_format),
                    "file_path": sync_file.file_path,
                    "version_key": sync_file.version_key,
                }
                for sync_file in self.version_sync_files
            ],
            "branch_for_release": self.branch_for_release,
            "commands_that_release": list(self.commands_that_release),
        }


def create_default_config() -> GitscribeConfig:
    """Return the configuration used as the starting point of ``gitscribe init``."""
    return GitscribeConfig(
        version="0.0.1",
        changelog_output_selections=[
            ChangelogOutputOption(TemplateOption.MARKDOWN, "CHANGELOG.md"),
        ],
    )


def _parse_output_selection(entry: Any) -> ChangelogOutputOption:
    if not isinstance(entry, dict):
        raise ConfigError("'changelog_output_selections' entries must be objects")
    try:
        option = TemplateOption(entry.get("template_option"))
    except ValueError as exc:
        choices = ", ".join(str(o) for o in TemplateOption)
        raise ConfigError(f"'template_option' must be one of: {choices}") from exc
    path = entry.get("output_filepath")
    if not isinstance(path, str) or not path:
        raise ConfigError("'output_filepath' must be a non-empty string")
    return ChangelogOutputOption(template_option=option, output_filepath=path)


def _parse_sync_file(entry: Any) -> VersionSyncFile:
    if not isinstance(entry, dict):
        raise ConfigError("'version_sync_files' entries must be objects")
    try:
        fmt = SyncFileFormat(entry.get("file_format"))
    except ValueError as exc:
        choices = ", ".join(str(f) for f in SyncFileFormat)
        raise ConfigError(f"'file_format' must be one of: {choices}") from exc
    path = entry.get("file_path")
    if not isinstance(path, str) or not path:
        raise ConfigError("'file_path' must be a non-empty string")
    key = entry.get("version_key", "version")
    if not isinstance(key, str) or not key:
        raise ConfigError("'version_key' must be a non-empty string")
    return VersionSyncFile(file_format=fmt, file_path=path, version_key=key)


def parse_config(data: Dict[str, Any]) -> GitscribeConfig:
    """Validate a decoded configuration object and build a :class:`GitscribeConfig`.

    Raises
    ------
    ConfigError
        If required keys are missing or any field has the wrong type.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    required_keys = ["version", "changelog_output_selections"]
    missing = [key for key in required_keys if key not in data]
    if missing:
        logger.error("Configuration file missing required keys: %s", missing)
        raise ConfigError(f"Missing required configuration keys: {', '.join(missing)}")

    if not isinstance(data["version"], str):
        raise ConfigError("'version' must be a string")
    try:
        Version.parse(data["version"])
    except VersionError as exc:
        raise ConfigError(f"'version' is invalid: {exc}") from exc
    if not isinstance(data["changelog_output_selections"], list):
        raise ConfigError("'changelog_output_selections' must be a list")

    project_repo = data.get("project_repo")
    if project_repo is not None and not isinstance(project_repo, str):
        raise ConfigError("'project_repo' must be a string or null")

    sync_entries = data.get("version_sync_files")
    if sync_entries is not None and not isinstance(sync_entries, list):
        raise ConfigError("'version_sync_files' must be a list or null")

    branch_for_release = data.get("branch_for_release", False)
    if not isinstance(branch_for_release, bool):
        raise ConfigError("'branch_for_release' must be a boolean")

    commands = data.get("commands_that_release", [])
    valid_commands = {str(d) for d in VersionDesignation}
    if not isinstance(commands, list) or any(c not in valid_commands for c in commands):
        raise ConfigError(
            f"'commands_that_release' must be a list drawn from: {', '.join(sorted(valid_commands))}"
        )

    return GitscribeConfig(
        version=data["version"],
        changelog_output_selections=[
            _parse_output_selection(entry) for entry in data["changelog_output_selections"]
        ],
        project_repo=project_repo or None,
        version_sync_files=None
        if sync_entries is None
        else [_parse_sync_file(entry) for entry in sync_entries],
        branch_for_release=branch_for_release,
        commands_that_release=list(commands),
    )


def load_config(repo_root: Path) -> GitscribeConfig:
    """Load ``gitscribe.json`` from ``repo_root``.

    Raises
    ------
    ConfigError
        If the file is missing, is not valid JSON, or fails validation.
    """
    config_path = repo_root / CONFIG_FILE_NAME
    if not config_path.exists():
        logger.error("Configuration file '%s' does not exist", config_path)
        raise ConfigError(
            f"Missing configuration file: {config_path}. "
            "Run `gitscribe init` to create one."
        )

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    config = parse_config(data)
    logger.debug("Loaded configuration from: %s", config_path)
    return config


def save_config(config: GitscribeConfig, repo_root: Path, create: bool = False) -> Path:
    """Write ``config`` to ``gitscribe.json`` in ``repo_root``.

    Parameters
    ----------
    create : bool
        If True, refuse to overwrite an existing file.

    Raises
    ------
    ConfigError
        If the file cannot be written, or exists while ``create`` is set.
    """
    config_path = repo_root / CONFIG_FILE_NAME
    content = json.dumps(config.to_dict(), indent=2, ensure_ascii=False) + "\n"
    try:
        with config_path.open("x" if create else "w", encoding="utf-8") as handle:
            handle.write(content)
    except FileExistsError as exc:
        raise ConfigError(f"Configuration file already exists: {config_path}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to write {config_path}: {exc}") from exc
    logger.debug("Saved configuration to: %s", config_path)
    return config_path
