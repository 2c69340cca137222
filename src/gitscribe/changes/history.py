"""
Entry point of the changelog engine.

Turns raw tagged log lines into a :class:`ChangeGroup` keyed by release,
with the version about to be created as the newest (pending) release.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from .change_classifier import DEFAULT_RULES, ClassifierRules
from .group_model import ChangeCategory, ChangeGroup
from .record_parser import parse_log
from .version_bucketer import bucket_changes, pending_release

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def group_changes_by_release(
    log_lines: Iterable[str],
    version: str,
    project_repo: Optional[str] = None,
    rules: ClassifierRules = DEFAULT_RULES,
    now: Optional[datetime] = None,
) -> ChangeGroup:
    """Parse, classify and bucket the commit history.

    Parameters
    ----------
    log_lines : Iterable[str]
        Tagged ``git log`` lines, newest first as git emits them.
    version : str
        The version being generated; it becomes the pending release.
    project_repo : Optional[str]
        Base repository URL used for commit links.
    rules : ClassifierRules
        Markers and shorthand table for classification.
    now : Optional[datetime]
        Timestamp of the pending release. Defaults to the current time.

    Raises
    ------
    ChangelogError
        Any parse or bucketing failure. Nothing partial is returned.
    """
    records = parse_log(log_lines, rules, project_repo)
    classified = [r for r in records if r.category is not ChangeCategory.UNCLASSIFIED]
    dropped = len(records) - len(classified)
    if dropped:
        logger.debug("Ignoring %d unclassified commit(s)", dropped)

    classified.append(pending_release(version, rules, now))
    return bucket_changes(classified)
