"""
Core data models for the update-center catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .errors import ArtifactResolutionError
from .java import JavaSpecificationVersion
from .time_utils import release_day
from .versions import VersionNumber


@dataclass(frozen=True)
class Dependency:
    """Dependency declared by a plugin release."""

    name: str
    version: str
    optional: bool = False


@dataclass(frozen=True)
class Artifact:
    """A single released version of a plugin or of the core."""

    group: str
    name: str
    version: VersionNumber
    url: str
    released_at: datetime
    required_core: Optional[VersionNumber] = None
    sha256: Optional[str] = None
    classifier: Optional[str] = None
    compatible_since: Optional[str] = None
    sandbox_status: Optional[str] = None
    minimum_java_version: Optional[JavaSpecificationVersion] = None
    title: Optional[str] = None
    dependencies: Tuple[Dependency, ...] = ()

    @property
    def gav(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"

    @property
    def identity(self) -> Tuple[str, str, VersionNumber, Optional[str]]:
        return (self.group, self.name, self.version, self.classifier)


def sort_by_version(artifacts: Iterable[Artifact]) -> List[Artifact]:
    """Most recent version first."""
    return sorted(artifacts, key=lambda a: a.version, reverse=True)


@dataclass(frozen=True)
class CatalogEntry:
    """All known versions of one plugin, newest first."""

    name: str
    artifacts: Tuple[Artifact, ...]

    def __post_init__(self) -> None:
        if not self.artifacts:
            raise ValueError(f"Catalog entry {self.name} has no versions")
        versions = [a.version for a in self.artifacts]
        if len(set(versions)) != len(versions):
            raise ValueError(f"Catalog entry {self.name} has duplicate versions")
        if versions != sorted(versions, reverse=True):
            raise ValueError(f"Catalog entry {self.name} is not ordered by version")

    @classmethod
    def of(cls, name: str, artifacts: Iterable[Artifact]) -> "CatalogEntry":
        return cls(name=name, artifacts=tuple(sort_by_version(artifacts)))

    @property
    def versions(self) -> Dict[VersionNumber, Artifact]:
        return {a.version: a for a in self.artifacts}

    @property
    def latest(self) -> Artifact:
        return self.artifacts[0]

    def filter(self, keep: Callable[[Artifact], bool]) -> Optional["CatalogEntry"]:
        """Return a new entry with the kept versions, or None if nothing is left."""
        kept = tuple(a for a in self.artifacts if keep(a))
        if not kept:
            return None
        if len(kept) == len(self.artifacts):
            return self
        return CatalogEntry(name=self.name, artifacts=kept)


@dataclass(frozen=True)
class ReleaseHistoryBucket:
    """Plugin releases published on one calendar day."""

    day: date
    releases: Tuple[Artifact, ...]


def group_by_release_date(entries: Iterable[CatalogEntry]) -> List[ReleaseHistoryBucket]:
    """Group plugin releases by day, newest day first, plugins by name."""
    by_day: Dict[date, List[Artifact]] = {}
    for entry in sorted(entries, key=lambda e: e.name):
        for artifact in entry.artifacts:
            by_day.setdefault(release_day(artifact.released_at), []).append(artifact)
    return [
        ReleaseHistoryBucket(day=day, releases=tuple(by_day[day]))
        for day in sorted(by_day, reverse=True)
    ]


@dataclass(frozen=True)
class PluginMetadata:
    """Display metadata resolved outside the repository."""

    title: str
    documentation_url: str


@dataclass(frozen=True)
class PluginRelease:
    """A catalog entry together with its latest release."""

    entry: CatalogEntry
    latest: Artifact
    documentation_url: str

    @property
    def name(self) -> str:
        return self.entry.name


@dataclass(frozen=True)
class ReleaseRecord:
    """One row of the release history."""

    name: str
    version: str
    gav: str
    timestamp: datetime
    url: str
    title: Optional[str] = None
    documentation_url: Optional[str] = None


@dataclass(frozen=True)
class HistoryDay:
    """Release records for one calendar day."""

    day: date
    releases: Tuple[ReleaseRecord, ...]


@dataclass(frozen=True)
class Catalog:
    """Views produced by the assembler for rendering."""

    plugins: Tuple[PluginRelease, ...]
    core: Optional[Artifact]
    release_history: Tuple[HistoryDay, ...]
    plugin_versions: Dict[str, CatalogEntry]
    failures: Tuple[ArtifactResolutionError, ...] = ()
