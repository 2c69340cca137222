import os

import pytest


@pytest.fixture(autouse=True)
def isolate_git_environment(monkeypatch):
    """Keep tests independent of the developer's git setup.

    Variables such as ``GIT_DIR`` or ``GIT_COMMITTER_DATE`` would change what
    ``git`` reports to the code under test.
    """
    for name in list(os.environ):
        if name.startswith("GIT_"):
            monkeypatch.delenv(name, raising=False)
    yield
