"""
Commit URL derivation for known hosting providers.
"""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

# (substring of the repository URL, path segment before the commit id)
PROVIDER_COMMIT_PATHS = (
    ("github", "commit"),
    # Bitbucket Server
    ("stash/projects", "commits"),
)


def resolve_commit_link(project_repo: Optional[str], commit_id: str) -> Optional[str]:
    """Return the URL of ``commit_id`` under ``project_repo``.

    Returns ``None`` when no repository URL is configured or when the
    hosting provider is not recognised; the commit is then rendered
    without a link.
    """
    if not project_repo:
        return None
    base = project_repo.rstrip("/")
    for marker, segment in PROVIDER_COMMIT_PATHS:
        if marker in base:
            return f"{base}/{segment}/{commit_id}"
    logger.debug("Unrecognised hosting provider for %s; commits will not be linked", base)
    return None
