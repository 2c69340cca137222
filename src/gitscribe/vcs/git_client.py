"""
Git client implementation for gitscribe.

This module wraps the Git operations required to cut a release: reading
the tagged commit log, checking the working tree, committing the release
and creating a release branch. All subprocess calls go through
:meth:`GitClient._run` so that unit tests can mock them easily.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

# Tagged, one-line-per-commit format parsed by gitscribe.changes.record_parser
LOG_FORMAT = "COMMIT_ID:%H AUTHOR:%an MESSAGE:%s DATE:%cd"

STATUS_LABELS = {
    "M": "Modified",
    "T": "File Type Changed",
    "A": "Added",
    "R": "Renamed",
    "D": "Deleted",
    "C": "Copied",
    "U": "Unmerged",
    "?": "Untracked",
}


@dataclass
class FileChange:
    """Representation of a single file change in the repository."""

    path: str
    status: str  # e.g. 'M' modified, 'A' added, 'D' deleted, '?' untracked

    @property
    def label(self) -> str:
        return STATUS_LABELS.get(self.status, "Unknown")


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


class GitClient:
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Basic Git commands
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If git is not installed, or the command exits with a non-zero
            status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise GitError("git executable not found on PATH") from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------
    def has_commits(self) -> bool:
        """Return True if HEAD points at a commit."""
        result = self._run(["rev-parse", "--verify", "--quiet", "HEAD"], check=False)
        return result.returncode == 0

    def get_log_lines(self) -> List[str]:
        """Return the tagged log of the current branch, newest commit first.

        A repository without commits yields an empty list.
        """
        if not self.has_commits():
            return []
        result = self._run(
            ["log", "--date=iso-strict", f"--pretty=format:{LOG_FORMAT}"], check=True
        )
        return [line for line in result.stdout.split("\n") if line.strip()]

    # ------------------------------------------------------------------
    # Status and change detection
    # ------------------------------------------------------------------
    def get_changes(self, include_untracked: bool = True) -> List[FileChange]:
        """Get the list of changed files in the working tree.

        Parameters
        ----------
        include_untracked : bool
            Whether untracked files (status '??') are reported.

        Raises
        ------
        GitError
            If the git status command fails.
        """
        result = self._run(["status", "--porcelain"], check=True)
        changes = []

        for line in result.stdout.splitlines():
            # Porcelain format: XY <path>, at least 4 characters
            if len(line) < 4 or not line.strip():
                continue

            status_code = line[:2]
            filename = line[3:]

            if status_code == "??":
                if include_untracked:
                    changes.append(FileChange(path=filename, status="?"))
                continue

            status = status_code.strip()
            if not status:
                continue
            changes.append(FileChange(path=filename, status=status[0]))

        return changes

    # ------------------------------------------------------------------
    # Branch operations
    # ------------------------------------------------------------------
    def branch_exists(self, branch_name: str) -> bool:
        """Check if a local branch exists."""
        result = self._run(["branch", "--list", branch_name], check=False)
        return bool(result.stdout.strip())

    def create_branch(self, branch_name: str) -> None:
        """Create and switch to a new local branch.

        Raises
        ------
        GitError
            If the branch already exists or checkout fails.
        """
        if self.branch_exists(branch_name):
            raise GitError(f"Branch '{branch_name}' already exists")
        self._run(["checkout", "-b", branch_name], check=True)

    # ------------------------------------------------------------------
    # Staging and committing
    # ------------------------------------------------------------------
    def stage_all(self) -> None:
        """Stage every change in the working tree."""
        self._run(["add", "--all"], check=True)

    def commit(self, message: str) -> None:
        """Create a commit with the given message."""
        self._run(["commit", "-m", message], check=True)
