#!/usr/bin/env python
"""
Thin wrapper script to invoke the gitscribe CLI.

Running ``python gitscribe.py`` is equivalent to running the
``gitscribe`` console script installed via ``pyproject.toml``.
"""

from gitscribe.cli import main


if __name__ == "__main__":
    main(prog_name="gitscribe")
