"""
Parsing of raw ``git log`` lines into :class:`CommitRecord` objects.

Each line carries four tagged fields in a fixed order::

    COMMIT_ID:<sha> AUTHOR:<name> MESSAGE:<subject> DATE:<iso-strict date>

The format is produced by :meth:`gitscribe.vcs.git_client.GitClient.get_log_lines`.
Reordered or missing tags are rejected rather than guessed at.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional

from .change_classifier import DEFAULT_RULES, ClassifierRules, classify_message, normalize_message
from .errors import MalformedLogLine, MalformedTimestamp
from .group_model import CommitRecord
from .link_resolver import resolve_commit_link

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

# Matches git's --date=iso-strict output, e.g. 2024-02-10T00:40:40-05:00
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_LINE_RE = re.compile(
    r"^COMMIT_ID:(?P<id>.*?) AUTHOR:(?P<author>.*?) MESSAGE:(?P<message>.*) DATE:(?P<date>.*)$"
)


def parse_timestamp(value: str) -> datetime:
    """Parse a commit date in the fixed log date format.

    Raises
    ------
    MalformedTimestamp
        If ``value`` does not match :data:`DATE_FORMAT`.
    """
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError as exc:
        raise MalformedTimestamp(f"Cannot parse commit date {value!r}: {exc}") from exc


def parse_log_line(
    line: str,
    rules: ClassifierRules = DEFAULT_RULES,
    project_repo: Optional[str] = None,
) -> CommitRecord:
    """Parse one log line into a :class:`CommitRecord`.

    Parameters
    ----------
    line : str
        A single line of tagged ``git log`` output.
    rules : ClassifierRules
        Shorthand table and markers used to normalise and classify the
        message.
    project_repo : Optional[str]
        Base repository URL used to build the commit link.

    Raises
    ------
    MalformedLogLine
        If a field tag is missing or the commit id or date is empty.
    MalformedTimestamp
        If the date field cannot be parsed.
    """
    match = _LINE_RE.match(line.strip())
    if match is None:
        raise MalformedLogLine(f"Log line is missing an expected field: {line!r}")

    commit_id = match.group("id").strip()
    date_text = match.group("date").strip()
    if not commit_id or not date_text:
        raise MalformedLogLine(f"Log line has an empty commit id or date: {line!r}")

    message = normalize_message(match.group("message"), rules)
    return CommitRecord(
        id=commit_id,
        author=match.group("author").strip(),
        message=message,
        timestamp=parse_timestamp(date_text),
        category=classify_message(message, rules),
        link=resolve_commit_link(project_repo, commit_id),
    )


def parse_log(
    lines: Iterable[str],
    rules: ClassifierRules = DEFAULT_RULES,
    project_repo: Optional[str] = None,
) -> List[CommitRecord]:
    """Parse every non-blank line of a log feed.

    The first malformed line aborts the whole feed.
    """
    records = [parse_log_line(line, rules, project_repo) for line in lines if line.strip()]
    logger.debug("Parsed %d commit record(s)", len(records))
    return records
