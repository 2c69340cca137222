"""
Assignment of changes to the release that first shipped them.

Release markers are sorted newest first and each one seeds an empty
bucket. Every feature or fix then goes to the earliest release whose
timestamp is not before the change, so regenerating a changelog back-fills
historical releases instead of piling everything onto the latest one.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from .change_classifier import DEFAULT_RULES, ClassifierRules
from .errors import InconsistentVersionState, MissingVersionSuffix
from .group_model import ChangeCategory, ChangeGroup, CommitRecord

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

PENDING_RELEASE_ID = "HEAD"
PENDING_RELEASE_AUTHOR = "gitscribe"

_VERSION_SUFFIX_RE = re.compile(r"([0-9]+\.[0-9]+\.[0-9]+)$")

_CHANGE_CATEGORIES = (ChangeCategory.FEATURE, ChangeCategory.FIX)


def extract_version(record: CommitRecord) -> str:
    """Return the ``MAJOR.MINOR.PATCH`` suffix of a release marker message.

    Raises
    ------
    MissingVersionSuffix
        If the message does not end in a version number.
    """
    match = _VERSION_SUFFIX_RE.search(record.message)
    if match is None:
        raise MissingVersionSuffix(
            f"Release commit {record.id} has no trailing version number: {record.message!r}"
        )
    return match.group(1)


def pending_release(
    version: str,
    rules: ClassifierRules = DEFAULT_RULES,
    now: Optional[datetime] = None,
) -> CommitRecord:
    """Build the synthetic release marker for the version being generated."""
    return CommitRecord(
        id=PENDING_RELEASE_ID,
        author=PENDING_RELEASE_AUTHOR,
        message=rules.release_message(version),
        timestamp=now if now is not None else datetime.now().astimezone(),
        category=ChangeCategory.RELEASE,
    )


def _resolve_release(
    change: CommitRecord, releases: List[Tuple[str, CommitRecord]]
) -> Tuple[str, CommitRecord]:
    candidates = [entry for entry in releases if entry[1].timestamp >= change.timestamp]
    if not candidates:
        raise InconsistentVersionState(
            f"Change {change.id} ({change.timestamp.isoformat()}) is newer than every "
            "known release, including the pending one"
        )
    # min() keeps the first of equal timestamps, i.e. the seeded order
    return min(candidates, key=lambda entry: entry[1].timestamp)


def bucket_changes(records: Iterable[CommitRecord]) -> ChangeGroup:
    """Group features and fixes under the release that first contained them.

    Parameters
    ----------
    records : Iterable[CommitRecord]
        Classified records including every release marker, the pending
        one among them. Unclassified records are ignored.

    Returns
    -------
    ChangeGroup
        One key per release, newest first. Each bucket keeps the input
        order of its changes.

    Raises
    ------
    MissingVersionSuffix
        If any release marker lacks a version; raised before any change is
        assigned.
    InconsistentVersionState
        If a change postdates every release.
    """
    records = list(records)
    markers = [r for r in records if r.category is ChangeCategory.RELEASE]
    changes = [r for r in records if r.category in _CHANGE_CATEGORIES]

    releases = [(extract_version(marker), marker) for marker in markers]
    releases.sort(key=lambda entry: entry[1].timestamp, reverse=True)

    group = ChangeGroup()
    for version, _ in releases:
        group.add_release(version)

    for change in changes:
        version, _ = _resolve_release(change, releases)
        group.append(version, change)

    logger.debug(
        "Bucketed %d change(s) into %d release(s)", len(changes), len(group)
    )
    return group
