"""
Semantic version handling for gitscribe.

Only plain ``MAJOR.MINOR.PATCH`` versions are supported; pre-release and
build metadata are rejected.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

_VERSION_RE = re.compile(r"^([0-9]+)\.([0-9]+)\.([0-9]+)$")


class VersionError(ValueError):
    """Raised when a version string is not ``MAJOR.MINOR.PATCH``."""

    pass


class VersionDesignation(str, enum.Enum):
    """Which part of the version a release bumps."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Version:
    """An immutable ``MAJOR.MINOR.PATCH`` version."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version string such as ``"1.4.2"``.

        Raises
        ------
        VersionError
            If ``text`` is not three dot-separated non-negative integers.
        """
        match = _VERSION_RE.match(text.strip()) if isinstance(text, str) else None
        if match is None:
            raise VersionError(f"Invalid version {text!r}; expected MAJOR.MINOR.PATCH")
        return cls(*(int(part) for part in match.groups()))

    def bump(self, designation: VersionDesignation) -> "Version":
        """Return the next version for ``designation``.

        A major bump resets minor and patch, a minor bump resets patch.
        """
        if designation is VersionDesignation.MAJOR:
            return Version(self.major + 1, 0, 0)
        if designation is VersionDesignation.MINOR:
            return Version(self.major, self.minor + 1, 0)
        return Version(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
