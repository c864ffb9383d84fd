"""
Version numbers for core and plugin releases.
"""

from __future__ import annotations

import re
from functools import total_ordering
from typing import Tuple

from .errors import MalformedVersionError


_VERSION_RE = re.compile(
    r"^(?P<numbers>\d+(?:\.\d+)*)"
    r"(?:[-._+]?(?P<qualifier>[A-Za-z0-9][A-Za-z0-9._+-]*))?$"
)
_TOKEN_RE = re.compile(r"\d+|[A-Za-z]+")

_QUALIFIER_RANKS = {
    "a": 0,
    "alpha": 0,
    "b": 1,
    "beta": 1,
    "m": 2,
    "milestone": 2,
    "cr": 3,
    "rc": 3,
    "snapshot": 4,
}
_UNKNOWN_RANK = len(set(_QUALIFIER_RANKS.values()))


def _qualifier_key(qualifier: str) -> Tuple[Tuple[int, int, str], ...]:
    key = []
    for token in _TOKEN_RE.findall(qualifier.lower()):
        if token.isdigit():
            key.append((0, int(token), ""))
        else:
            key.append((1, _QUALIFIER_RANKS.get(token, _UNKNOWN_RANK), token))
    return tuple(key)


@total_ordering
class VersionNumber:
    """Dotted version number with an optional pre-release qualifier.

    ``1.0`` and ``1.0.0`` are equal; ``1.1-beta`` sorts before ``1.1``.
    """

    __slots__ = ("_text", "components", "qualifier", "_key")

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            raise MalformedVersionError(text, "expected a string")
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise MalformedVersionError(text)
        qualifier = match.group("qualifier")
        if qualifier is not None and qualifier[-1] in ".-_+":
            raise MalformedVersionError(text, "qualifier ends with a separator")

        self._text = text.strip()
        self.components: Tuple[int, ...] = tuple(
            int(part) for part in match.group("numbers").split(".")
        )
        self.qualifier = qualifier

        trimmed = list(self.components)
        while len(trimmed) > 1 and trimmed[-1] == 0:
            trimmed.pop()
        # Released versions sort after any qualified version with the same numbers.
        release_key = (1, ()) if qualifier is None else (0, _qualifier_key(qualifier))
        self._key = (tuple(trimmed), release_key)

    @property
    def is_prerelease(self) -> bool:
        return self.qualifier is not None

    @property
    def component_count(self) -> int:
        return len(self.components)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other: "VersionNumber") -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self._key < other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"VersionNumber({self._text!r})"


def compare_versions(left: str, right: str) -> int:
    """Compare two version strings, returning -1, 0 or 1."""
    a = VersionNumber(left)
    b = VersionNumber(right)
    if a == b:
        return 0
    return -1 if a < b else 1


def parse_version(value: object) -> VersionNumber:
    """Return ``value`` as a VersionNumber, parsing strings."""
    if isinstance(value, VersionNumber):
        return value
    return VersionNumber(value)  # type: ignore[arg-type]
