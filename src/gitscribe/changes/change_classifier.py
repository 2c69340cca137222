"""
Classification of commit messages into changelog categories.

Classification is a plain substring search over the normalised message,
checked in a fixed precedence order: release marker, then ``feat:``, then
``fix:``. Messages matching none of them are unclassified and never reach
the changelog. All markers live in :class:`ClassifierRules` so callers can
classify against a different release prefix or shorthand table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .group_model import ChangeCategory

RELEASE_COMMIT_PREFIX = "chore: 📝 update changelog and bump version to "

DEFAULT_SHORTHANDS: Mapping[str, str] = MappingProxyType({
    ":sparkles:": "✨",
    ":bug:": "🐛",
})


@dataclass(frozen=True)
class ClassifierRules:
    """Markers used to normalise and classify commit messages.

    Attributes
    ----------
    release_prefix : str
        Literal text that identifies a version bump commit. The version
        number follows it at the end of the message.
    feature_marker : str
        Substring identifying a feature commit.
    fix_marker : str
        Substring identifying a bug fix commit.
    shorthands : Mapping[str, str]
        Emoji shorthand tokens and the glyphs that replace them. Stored as
        a read-only copy.
    """

    release_prefix: str = RELEASE_COMMIT_PREFIX
    feature_marker: str = "feat:"
    fix_marker: str = "fix:"
    shorthands: Mapping[str, str] = field(default_factory=lambda: DEFAULT_SHORTHANDS)

    def __post_init__(self) -> None:
        object.__setattr__(self, "shorthands", MappingProxyType(dict(self.shorthands)))

    def release_message(self, version: str) -> str:
        """Return the commit message used to record ``version``."""
        return f"{self.release_prefix}{version}"


DEFAULT_RULES = ClassifierRules()


def normalize_message(message: str, rules: ClassifierRules = DEFAULT_RULES) -> str:
    """Expand shorthand tokens into glyphs and trim surrounding whitespace."""
    for token, glyph in rules.shorthands.items():
        message = message.replace(token, glyph)
    return message.strip()


def classify_message(message: str, rules: ClassifierRules = DEFAULT_RULES) -> ChangeCategory:
    """Classify a normalised commit message.

    Parameters
    ----------
    message : str
        The commit subject, already normalised.
    rules : ClassifierRules
        Markers to look for.

    Returns
    -------
    ChangeCategory
        ``RELEASE`` if the release prefix occurs anywhere in the message,
        else ``FEATURE`` or ``FIX`` on their markers, else
        ``UNCLASSIFIED``.
    """
    if rules.release_prefix in message:
        return ChangeCategory.RELEASE
    if rules.feature_marker in message:
        return ChangeCategory.FEATURE
    if rules.fix_marker in message:
        return ChangeCategory.FIX
    return ChangeCategory.UNCLASSIFIED
