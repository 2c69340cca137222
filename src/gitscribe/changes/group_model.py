"""
Data models for grouping commits by release.

A :class:`CommitRecord` is one parsed line of history. The
:class:`ChangeGroup` is the output of the bucketing step: an
insertion-ordered mapping from version string to the commits that first
shipped in that version. Its iteration order is newest release first and
must be preserved by anything that renders it.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import InconsistentVersionState


class ChangeCategory(str, enum.Enum):
    """Semantic category of a commit."""

    FEATURE = "Feature"
    FIX = "Fix"
    RELEASE = "Release"
    UNCLASSIFIED = "Unclassified"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CommitRecord:
    """Representation of a single parsed commit.

    Attributes
    ----------
    id : str
        Full commit SHA, or ``"HEAD"`` for the pending release.
    author : str
        Author name as reported by git.
    message : str
        Normalised and trimmed subject line.
    timestamp : datetime
        Timezone-aware commit date.
    category : ChangeCategory
        Category derived from ``message`` at parse time.
    link : Optional[str]
        URL of the commit on the hosting provider, if known.
    """

    id: str
    author: str
    message: str
    timestamp: datetime
    category: ChangeCategory
    link: Optional[str] = None

    @property
    def short_id(self) -> str:
        return self.id[:7]


class ChangeGroup(Mapping):
    """Version-keyed, insertion-ordered groups of commits.

    Entries are kept as a list of ``(version, commits)`` pairs with a
    separate index from version to position, so the order never depends
    on the behaviour of a particular dict implementation.
    """

    def __init__(self) -> None:
        self._entries: List[Tuple[str, List[CommitRecord]]] = []
        self._index: Dict[str, int] = {}

    def add_release(self, version: str) -> None:
        """Append an empty bucket for ``version``.

        Adding a version that already has a bucket keeps its original
        position.
        """
        if version in self._index:
            return
        self._index[version] = len(self._entries)
        self._entries.append((version, []))

    def append(self, version: str, record: CommitRecord) -> None:
        """Append ``record`` to the bucket of ``version``.

        Raises
        ------
        InconsistentVersionState
            If no bucket was seeded for ``version``.
        """
        position = self._index.get(version)
        if position is None:
            raise InconsistentVersionState(
                f"No release bucket for version {version} (commit {record.id})"
            )
        self._entries[position][1].append(record)

    def __getitem__(self, version: str) -> List[CommitRecord]:
        return self._entries[self._index[version]][1]

    def __iter__(self) -> Iterator[str]:
        return (version for version, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, version: object) -> bool:
        return version in self._index

    def __repr__(self) -> str:
        body = ", ".join(f"{v!r}: {len(c)} change(s)" for v, c in self._entries)
        return f"ChangeGroup({{{body}}})"

    def total_changes(self) -> int:
        return sum(len(commits) for _, commits in self._entries)
