"""
Commit classification and release bucketing.

See :mod:`gitscribe.changes.history` for the single entry point and
:mod:`gitscribe.changes.group_model` for the data it produces.
"""

from .change_classifier import DEFAULT_RULES, ClassifierRules, classify_message  # noqa: F401
from .errors import (  # noqa: F401
    ChangelogError,
    InconsistentVersionState,
    MalformedLogLine,
    MalformedTimestamp,
    MissingVersionSuffix,
)
from .group_model import ChangeCategory, ChangeGroup, CommitRecord  # noqa: F401
from .history import group_changes_by_release  # noqa: F401
