"""
Comparable major.minor version values.

Only the first two dot-separated components of a version string are
significant. Strings with fewer than two numeric components are rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Optional, Tuple

from tfbridge.errors import VersionError

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    major: int
    minor: int

    @property
    def parts(self) -> Tuple[int, int]:
        return (self.major, self.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    def __hash__(self) -> int:
        return hash(self.parts)

    def __eq__(self, other: Any) -> bool:
        try:
            other_version = _coerce(other)
        except VersionError:
            return False
        if other_version is None:
            return NotImplemented
        return self.parts == other_version.parts

    def __lt__(self, other: Any) -> bool:
        other_version = _coerce(other)
        if other_version is None:
            return NotImplemented
        return self.parts < other_version.parts


def _coerce(value: Any) -> Optional[Version]:
    if isinstance(value, Version):
        return value
    if isinstance(value, str):
        return parse_version(value)
    return None


def parse_version(text: Optional[str]) -> Version:
    """
    Parse the major.minor part of a dotted version string.

    Parameters
    ----------
    text : Optional[str]
        Version string such as ``"2.3.0"`` or ``"1.15.0rc1"``.

    Returns
    -------
    Version
        The major.minor value, e.g. ``Version(2, 3)``.

    Raises
    ------
    VersionError
        If `text` is None, not a string, has fewer than two dot-separated
        components, or one of the first two components has no leading digits.
    """
    if text is None:
        raise VersionError("Version string is missing")
    if not isinstance(text, str):
        raise VersionError(f"Version must be a string; got {type(text).__name__}")

    components = text.strip().split(".")
    if len(components) < 2:
        raise VersionError(
            f"Malformed version string {text!r}: expected at least major.minor"
        )

    numbers = []
    for component in components[:2]:
        match = _LEADING_DIGITS.match(component)
        if match is None:
            raise VersionError(
                f"Malformed version string {text!r}: "
                f"component {component!r} is not numeric"
            )
        numbers.append(int(match.group(1)))
    return Version(numbers[0], numbers[1])
