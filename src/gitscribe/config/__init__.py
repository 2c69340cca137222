"""
Configuration loading for gitscribe.

Reads and writes the ``gitscribe.json`` file in the repository root. See
:mod:`gitscribe.config.loader` for implementation details.
"""

from .loader import ConfigError, GitscribeConfig, load_config, save_config  # noqa: F401
