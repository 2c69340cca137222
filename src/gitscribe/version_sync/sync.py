"""
Propagation of the release version into other manifest files.

Projects often keep a second copy of their version number in a file owned
by another package manager (``package.json``, ``Cargo.toml``, a Poetry
``pyproject.toml``, a YAML manifest). Each configured file gets its
version key overwritten with the new version. TOML files are edited with
:mod:`tomlkit` so comments and layout survive the rewrite.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

import tomlkit
from tomlkit.exceptions import TOMLKitError
import yaml

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class VersionSyncError(Exception):
    """Raised when a version sync file cannot be read, parsed or updated."""

    pass


class SyncFileFormat(str, enum.Enum):
    """Supported manifest formats."""

    JSON = "Json"
    CARGO_TOML = "CargoToml"
    POETRY_TOML = "PoetryToml"
    YAML = "Yaml"

    def __str__(self) -> str:
        return self.value


# Table holding the version key for each TOML flavour
_TOML_TABLES = {
    SyncFileFormat.CARGO_TOML: ("package",),
    SyncFileFormat.POETRY_TOML: ("tool", "poetry"),
}


@dataclass
class VersionSyncFile:
    """A file whose version key is kept in step with the release version."""

    file_format: SyncFileFormat
    file_path: str
    version_key: str = "version"


def _sync_json(text: str, key: str, version: str) -> str:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise VersionSyncError("top-level JSON value is not an object")
    data[key] = version
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _sync_toml(text: str, table_path: Sequence[str], key: str, version: str) -> str:
    document = tomlkit.parse(text)
    table: Any = document
    for name in table_path:
        if name not in table:
            raise VersionSyncError(f"missing [{'.'.join(table_path)}] table")
        table = table[name]
    table[key] = version
    return tomlkit.dumps(document)


def _sync_yaml(text: str, key: str, version: str) -> str:
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise VersionSyncError("top-level YAML value is not a mapping")
    data[key] = version
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def sync_version_file(sync_file: VersionSyncFile, version: str, repo_root: Optional[Path] = None) -> Path:
    """Write ``version`` into a single manifest file.

    Returns
    -------
    Path
        The path that was updated.

    Raises
    ------
    VersionSyncError
        If the file is missing, cannot be parsed, or lacks the table the
        version key belongs to.
    """
    path = Path(sync_file.file_path)
    if repo_root is not None and not path.is_absolute():
        path = repo_root / path

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise VersionSyncError(f"Cannot read {path}: {exc}") from exc

    fmt = SyncFileFormat(sync_file.file_format)
    try:
        if fmt is SyncFileFormat.JSON:
            updated = _sync_json(text, sync_file.version_key, version)
        elif fmt is SyncFileFormat.YAML:
            updated = _sync_yaml(text, sync_file.version_key, version)
        else:
            updated = _sync_toml(text, _TOML_TABLES[fmt], sync_file.version_key, version)
    except VersionSyncError as exc:
        raise VersionSyncError(f"Cannot update {path}: {exc}") from exc
    except (ValueError, yaml.YAMLError, TOMLKitError) as exc:
        raise VersionSyncError(f"Cannot parse {path} as {fmt}: {exc}") from exc

    try:
        path.write_text(updated, encoding="utf-8")
    except OSError as exc:
        raise VersionSyncError(f"Cannot write {path}: {exc}") from exc

    logger.debug("Set %s=%s in %s", sync_file.version_key, version, path)
    return path


def sync_version_to_files(
    sync_files: Iterable[VersionSyncFile], version: str, repo_root: Optional[Path] = None
) -> List[Path]:
    """Write ``version`` into every configured manifest, stopping at the first failure."""
    return [sync_version_file(sync_file, version, repo_root) for sync_file in sync_files]
