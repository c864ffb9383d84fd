"""
Interfaces for artifact repositories, predicates and metadata resolvers.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Protocol

from .errors import ArtifactResolutionError
from .models import Artifact, CatalogEntry, PluginMetadata, ReleaseHistoryBucket
from .versions import VersionNumber


logger = logging.getLogger(__name__)

ErrorHandler = Callable[[ArtifactResolutionError], None]


def log_resolution_error(error: ArtifactResolutionError) -> None:
    """Default handler for per-artifact failures."""
    logger.warning("%s", error)


class FailureCollector:
    """Error handler that logs failures and keeps them for the summary."""

    def __init__(self) -> None:
        self.failures: List[ArtifactResolutionError] = []

    def __call__(self, error: ArtifactResolutionError) -> None:
        log_resolution_error(error)
        self.failures.append(error)


class ArtifactRepository(Protocol):
    """Source of plugin and core releases.

    Every call returns a freshly computed, deterministically ordered result.
    """

    def list_plugin_entries(self) -> List[CatalogEntry]:
        """One entry per plugin, ordered by plugin name."""
        ...

    def list_core_releases(self) -> Dict[VersionNumber, Artifact]:
        """Core releases, most recent version first."""
        ...

    def list_releases_by_date(self) -> List[ReleaseHistoryBucket]:
        """Plugin releases grouped by day, most recent day first."""
        ...


class ArtifactPredicate(Protocol):
    """Decides whether an artifact version stays in the catalog."""

    def keep(self, artifact: Artifact) -> bool:
        ...


class MetadataResolver(Protocol):
    """Resolve display metadata for a plugin release.

    Raises ArtifactResolutionError when the metadata cannot be obtained.
    """

    def resolve(self, artifact: Artifact) -> PluginMetadata:
        ...
