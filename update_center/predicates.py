"""
Compatibility predicates applied to individual plugin releases.
"""

from __future__ import annotations

from typing import Callable, Union

from .interfaces import ArtifactPredicate
from .java import JavaSpecificationVersion
from .models import Artifact
from .versions import VersionNumber, parse_version


Predicate = Union[ArtifactPredicate, Callable[[Artifact], bool]]


def keep_function(predicate: Predicate) -> Callable[[Artifact], bool]:
    """Accept either a predicate object or a plain callable."""
    keep = getattr(predicate, "keep", None)
    if callable(keep):
        return keep
    if callable(predicate):
        return predicate
    raise TypeError(f"Not a predicate: {predicate!r}")


class JavaCompatible(ArtifactPredicate):
    """Keep releases that run on the target Java version."""

    def __init__(self, target: Union[str, JavaSpecificationVersion]) -> None:
        if not isinstance(target, JavaSpecificationVersion):
            target = JavaSpecificationVersion(target)
        self.target = target

    def keep(self, artifact: Artifact) -> bool:
        required = artifact.minimum_java_version
        return required is None or required <= self.target

    def __repr__(self) -> str:
        return f"JavaCompatible({str(self.target)!r})"


class RequiredCoreAtMost(ArtifactPredicate):
    """Keep releases installable on a core no newer than ``version``."""

    def __init__(self, version: Union[str, VersionNumber]) -> None:
        self.version = parse_version(version)

    def keep(self, artifact: Artifact) -> bool:
        return artifact.required_core is None or artifact.required_core <= self.version

    def __repr__(self) -> str:
        return f"RequiredCoreAtMost({str(self.version)!r})"


class AllOf(ArtifactPredicate):
    """Logical AND of predicates; keeps everything when empty."""

    def __init__(self, *predicates: Predicate) -> None:
        self.predicates = tuple(predicates)
        self._keeps = tuple(keep_function(p) for p in predicates)

    def keep(self, artifact: Artifact) -> bool:
        return all(keep(artifact) for keep in self._keeps)

    def __repr__(self) -> str:
        return f"AllOf{self.predicates!r}"
