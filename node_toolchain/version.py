"""Version constraints for Node.js lookups.

A constraint is a major version with an optional minor. ``"20"`` matches any
20.x release, ``"20.0"`` matches only 20.0.x and ``"20.11"`` only 20.11.x.
Patch and build components are accepted and ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from node_toolchain.errors import InvalidVersionFormat

_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.\d+){0,2}$")


@dataclass(frozen=True)
class VersionConstraint:
    major: int
    minor: int | None = None

    def as_tuple(self) -> tuple[int, int]:
        return (self.major, self.minor or 0)

    def __str__(self) -> str:
        if self.minor is None:
            return str(self.major)
        return f"{self.major}.{self.minor}"


def _split(text: str | None) -> tuple[int, int | None] | None:
    if text is None:
        return None
    s = text.strip()
    if s.startswith("v"):
        s = s[1:].strip()
    m = _VERSION_RE.match(s)
    if not m:
        return None
    major = int(m.group(1))
    minor = int(m.group(2)) if m.group(2) is not None else None
    return major, minor


def parse_constraint(text: str | None) -> VersionConstraint:
    """Parse ``text`` (e.g. ``"20"``, ``"20.11"``, ``"v20.11.1"``).

    Raises InvalidVersionFormat for ``None``, blank or non-numeric input.
    """
    parts = _split(text)
    if parts is None:
        raise InvalidVersionFormat(text)
    return VersionConstraint(*parts)


def parse_version(text: str | None) -> tuple[int, int] | None:
    """Parse a reported version (``v20.11.1``) into ``(major, minor)``.

    Returns None instead of raising so callers can move on to the next
    candidate.
    """
    parts = _split(text)
    if parts is None:
        return None
    major, minor = parts
    return major, minor or 0


def matches(candidate: tuple[int, int], constraint: VersionConstraint | None) -> bool:
    if constraint is None:
        return True
    major, minor = candidate
    if major != constraint.major:
        return False
    return constraint.minor is None or minor == constraint.minor
