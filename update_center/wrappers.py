"""
Repository decorators that narrow or cap the set of releases.

Each wrapper holds its inner repository and computes a new result on every
call; nothing is modified in place.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Union

from .errors import ConfigurationError
from .interfaces import ArtifactRepository
from .models import Artifact, CatalogEntry, ReleaseHistoryBucket
from .predicates import AllOf, Predicate
from .versions import VersionNumber, parse_version


logger = logging.getLogger(__name__)

STABLE_CORE_COMPONENTS = 3


def filter_entries(
    entries: Iterable[CatalogEntry], keep: Callable[[Artifact], bool]
) -> List[CatalogEntry]:
    """Filter versions of every entry, dropping entries left empty."""
    result = []
    for entry in entries:
        filtered = entry.filter(keep)
        if filtered is None:
            logger.debug("Dropping %s: no versions left", entry.name)
            continue
        result.append(filtered)
    return result


def filter_history(
    buckets: Iterable[ReleaseHistoryBucket], keep: Callable[[Artifact], bool]
) -> List[ReleaseHistoryBucket]:
    """Filter releases of every day, dropping days left empty."""
    result = []
    for bucket in buckets:
        kept = tuple(a for a in bucket.releases if keep(a))
        if kept:
            result.append(ReleaseHistoryBucket(day=bucket.day, releases=kept))
    return result


class RepositoryWrapper(ArtifactRepository):
    """Delegates to ``base``; subclasses override what they filter."""

    def __init__(self, base: ArtifactRepository) -> None:
        self.base = base

    def list_plugin_entries(self) -> List[CatalogEntry]:
        return self.base.list_plugin_entries()

    def list_core_releases(self) -> Dict[VersionNumber, Artifact]:
        return self.base.list_core_releases()

    def list_releases_by_date(self) -> List[ReleaseHistoryBucket]:
        return self.base.list_releases_by_date()


class PluginFilter(RepositoryWrapper):
    """Drops plugin releases rejected by ``keep`` from entries and history."""

    def keep(self, artifact: Artifact) -> bool:
        raise NotImplementedError

    def list_plugin_entries(self) -> List[CatalogEntry]:
        return filter_entries(self.base.list_plugin_entries(), self.keep)

    def list_releases_by_date(self) -> List[ReleaseHistoryBucket]:
        return filter_history(self.base.list_releases_by_date(), self.keep)


class Truncated(RepositoryWrapper):
    """Only the first ``count`` plugins."""

    def __init__(self, base: ArtifactRepository, count: int) -> None:
        super().__init__(base)
        if count < 0:
            raise ConfigurationError(f"Plugin count must not be negative: {count}")
        self.count = count

    def list_plugin_entries(self) -> List[CatalogEntry]:
        return self.base.list_plugin_entries()[: self.count]


class _ExperimentalSplit(PluginFilter):
    keep_prerelease: bool

    def keep(self, artifact: Artifact) -> bool:
        return artifact.version.is_prerelease == self.keep_prerelease


class ExperimentalOnly(_ExperimentalSplit):
    """Only alpha/beta (qualified) plugin releases."""

    keep_prerelease = True


class NoExperimental(_ExperimentalSplit):
    """Only plugin releases without a qualifier."""

    keep_prerelease = False


class StableCoreOnly(RepositoryWrapper):
    """Only LTS core releases, i.e. three-component versions."""

    def list_core_releases(self) -> Dict[VersionNumber, Artifact]:
        return {
            version: artifact
            for version, artifact in self.base.list_core_releases().items()
            if version.component_count == STABLE_CORE_COMPONENTS
        }


class VersionCapped(PluginFilter):
    """Hide plugin and core releases newer than the caps.

    When only ``plugin_cap`` is given it also caps the core.
    """

    def __init__(
        self,
        base: ArtifactRepository,
        plugin_cap: Optional[Union[str, VersionNumber]] = None,
        core_cap: Optional[Union[str, VersionNumber]] = None,
    ) -> None:
        super().__init__(base)
        self.plugin_cap = parse_version(plugin_cap) if plugin_cap is not None else None
        if core_cap is not None:
            self.core_cap: Optional[VersionNumber] = parse_version(core_cap)
        else:
            self.core_cap = self.plugin_cap

    def keep(self, artifact: Artifact) -> bool:
        return self.plugin_cap is None or artifact.version <= self.plugin_cap

    def list_core_releases(self) -> Dict[VersionNumber, Artifact]:
        releases = self.base.list_core_releases()
        if self.core_cap is None:
            return releases
        return {v: a for v, a in releases.items() if v <= self.core_cap}


class PredicateFiltered(PluginFilter):
    """Only plugin releases accepted by every predicate."""

    def __init__(self, base: ArtifactRepository, *predicates: Predicate) -> None:
        super().__init__(base)
        self.predicate = AllOf(*predicates)

    def keep(self, artifact: Artifact) -> bool:
        return self.predicate.keep(artifact)
