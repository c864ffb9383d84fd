"""
Java specification versions declared by plugins.
"""

from __future__ import annotations

from functools import total_ordering

from packaging import version as pkg_version


@total_ordering
class JavaSpecificationVersion:
    """A Java specification version such as ``1.8``, ``11`` or ``17``.

    Legacy ``1.x`` spellings are normalized, so ``1.8`` equals ``8``.
    """

    def __init__(self, text: str) -> None:
        value = str(text).strip()
        if value.startswith("1.") and value.count(".") == 1:
            value = value[2:]
        try:
            parsed = pkg_version.Version(value)
        except pkg_version.InvalidVersion as e:
            raise ValueError(f"Invalid Java specification version: {text!r}") from e
        qualified = (parsed.pre, parsed.post, parsed.dev, parsed.local)
        if any(part is not None for part in qualified):
            raise ValueError(f"Invalid Java specification version: {text!r}")
        self.text = str(text).strip()
        self.version = parsed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JavaSpecificationVersion):
            return NotImplemented
        return self.version == other.version

    def __lt__(self, other: "JavaSpecificationVersion") -> bool:
        if not isinstance(other, JavaSpecificationVersion):
            return NotImplemented
        return self.version < other.version

    def __hash__(self) -> int:
        return hash(self.version)

    def __str__(self) -> str:
        return str(self.version)

    def __repr__(self) -> str:
        return f"JavaSpecificationVersion({self.text!r})"
