"""
Error taxonomy for changelog generation.

Every error raised while turning the commit history into a
:class:`~gitscribe.changes.group_model.ChangeGroup` is fatal: the whole
operation is aborted and no partial changelog is produced.
"""

from __future__ import annotations


class ChangelogError(Exception):
    """Base class for fatal changelog generation errors."""

    pass


class MalformedLogLine(ChangelogError):
    """Raised when a log line lacks one of the expected tagged fields."""

    pass


class MalformedTimestamp(ChangelogError):
    """Raised when a commit date does not match the fixed date format."""

    pass


class MissingVersionSuffix(ChangelogError):
    """Raised when a release marker message does not end in MAJOR.MINOR.PATCH."""

    pass


class InconsistentVersionState(ChangelogError):
    """Raised when a change cannot be placed in a known release bucket."""

    pass
