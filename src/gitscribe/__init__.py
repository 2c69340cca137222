"""
Top-level package for gitscribe.

This package exposes the main CLI entry point via the
``gitscribe.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
