"""
Changelog rendering. See :mod:`gitscribe.changelog.renderer`.
"""

from .renderer import RenderError, TemplateOption, generate_and_write_changelogs, render_changelog  # noqa: F401
