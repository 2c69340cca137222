"""
Version control integration.

gitscribe reads history from, and commits releases to, Git repositories
through :class:`~gitscribe.vcs.git_client.GitClient`.
"""

from .git_client import FileChange, GitClient, GitError  # noqa: F401
