"""
Assemble the plugin catalog, core release and release history views.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from .errors import ArtifactResolutionError
from .interfaces import ArtifactRepository, ErrorHandler, MetadataResolver, log_resolution_error
from .models import (
    Artifact,
    Catalog,
    CatalogEntry,
    HistoryDay,
    PluginMetadata,
    PluginRelease,
    ReleaseRecord,
)
from .time_utils import ensure_utc, is_recent


logger = logging.getLogger(__name__)

DEFAULT_PLUGIN_SITE = "https://plugins.jenkins.io"
RECENT_RELEASE_DAYS = 31


class DefaultMetadataResolver(MetadataResolver):
    """Title from the artifact, documentation URL on the plugin site."""

    def __init__(self, plugin_site: str = DEFAULT_PLUGIN_SITE) -> None:
        self.plugin_site = plugin_site.rstrip("/")

    def resolve(self, artifact: Artifact) -> PluginMetadata:
        return PluginMetadata(
            title=artifact.title or artifact.name,
            documentation_url=f"{self.plugin_site}/{artifact.name}",
        )


class MappingMetadataResolver(MetadataResolver):
    """Documentation URLs looked up in a plugin name -> URL mapping."""

    def __init__(
        self,
        documentation_urls: Mapping[str, str],
        fallback: Optional[MetadataResolver] = None,
    ) -> None:
        self.documentation_urls = dict(documentation_urls)
        self.fallback = fallback

    @classmethod
    def from_file(
        cls, path: Path, fallback: Optional[MetadataResolver] = None
    ) -> "MappingMetadataResolver":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        urls = {}
        for name, value in data.items():
            urls[name] = value.get("url", "") if isinstance(value, dict) else str(value)
        return cls(urls, fallback=fallback)

    def resolve(self, artifact: Artifact) -> PluginMetadata:
        url = self.documentation_urls.get(artifact.name)
        if url is None:
            if self.fallback is not None:
                return self.fallback.resolve(artifact)
            raise ArtifactResolutionError(
                artifact.name, str(artifact.version), "no documentation URL"
            )
        return PluginMetadata(title=artifact.title or artifact.name, documentation_url=url)


class CatalogAssembler:
    """Build the views handed to rendering from a decorated repository."""

    def __init__(
        self,
        repository: ArtifactRepository,
        metadata: Optional[MetadataResolver] = None,
        plugin_site: str = DEFAULT_PLUGIN_SITE,
        now: Optional[datetime] = None,
        recent_days: int = RECENT_RELEASE_DAYS,
        skip_release_history: bool = False,
        skip_plugin_versions: bool = False,
        on_error: Optional[ErrorHandler] = None,
        source_failures: Sequence[ArtifactResolutionError] = (),
    ):
        """Initialize the assembler.

        Args:
            repository: Outermost repository of the decorator chain
            metadata: Resolver for titles and documentation URLs
            plugin_site: Base URL of the plugin site used in release history
            now: Reference time for the recency window (default: current time)
            recent_days: Releases newer than this get full display metadata
            skip_release_history: Do not build the release history
            skip_plugin_versions: Do not build the plugin versions view
            on_error: Called for every per-artifact failure
            source_failures: Failures reported while reading the repository,
                listed first in the assembled catalog
        """
        self.repository = repository
        self.plugin_site = plugin_site.rstrip("/")
        self.metadata = metadata or DefaultMetadataResolver(self.plugin_site)
        self.now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
        self.recent_days = recent_days
        self.skip_release_history = skip_release_history
        self.skip_plugin_versions = skip_plugin_versions
        self.on_error = on_error or log_resolution_error
        self.source_failures = source_failures
        self.failures: List[ArtifactResolutionError] = []

    def _record(self, error: ArtifactResolutionError) -> None:
        self.failures.append(error)
        self.on_error(error)

    def build_plugins(self) -> List[PluginRelease]:
        """Each plugin entry with its latest release."""
        logger.info("Gathering list of plugins and versions")
        plugins = []
        for entry in self.repository.list_plugin_entries():
            latest = entry.latest
            if not latest.sha256:
                logger.info("Skipping due to lack of checksums: %s", entry.name)
                self._record(ArtifactResolutionError(
                    entry.name, str(latest.version), "missing checksum"
                ))
                continue
            try:
                metadata = self.metadata.resolve(latest)
            except ArtifactResolutionError as e:
                self._record(e)
                continue
            logger.debug("%s => %s", entry.name, latest.gav)
            plugins.append(PluginRelease(
                entry=entry,
                latest=latest,
                documentation_url=metadata.documentation_url,
            ))
        logger.info("Total %d plugins listed.", len(plugins))
        return plugins

    def build_core(self) -> Optional[Artifact]:
        """Newest remaining core release, or None."""
        logger.info("Finding latest core release")
        releases = self.repository.list_core_releases()
        if not releases:
            logger.info("No core release available")
            return None
        latest = releases[max(releases)]
        logger.info("core => %s", latest.version)
        return latest

    def build_release_history(self) -> List[HistoryDay]:
        """Release records grouped by day, with metadata for recent releases."""
        logger.info("Building release history")
        history = []
        for bucket in self.repository.list_releases_by_date():
            logger.debug("Releases on %s", bucket.day.isoformat())
            records = tuple(self._release_record(a) for a in bucket.releases)
            history.append(HistoryDay(day=bucket.day, releases=records))
        return history

    def _release_record(self, artifact: Artifact) -> ReleaseRecord:
        title = None
        documentation_url = None
        if is_recent(artifact.released_at, self.now, self.recent_days):
            try:
                metadata = self.metadata.resolve(artifact)
                title = metadata.title or artifact.name
                documentation_url = metadata.documentation_url
            except ArtifactResolutionError as e:
                logger.info("Failed to resolve plugin %s so using defaults", artifact.name)
                self._record(e)
                title = artifact.name
                documentation_url = ""
        return ReleaseRecord(
            name=artifact.name,
            version=str(artifact.version),
            gav=artifact.gav,
            timestamp=artifact.released_at,
            url=f"{self.plugin_site}/{artifact.name}",
            title=title,
            documentation_url=documentation_url,
        )

    def build_plugin_versions(self) -> Dict[str, CatalogEntry]:
        """Every remaining version of every plugin, keyed by plugin name."""
        logger.info("Building plugin versions index")
        return {entry.name: entry for entry in self.repository.list_plugin_entries()}

    def assemble(self) -> Catalog:
        self.failures = []
        plugins = self.build_plugins()
        core = self.build_core()
        history = [] if self.skip_release_history else self.build_release_history()
        versions = {} if self.skip_plugin_versions else self.build_plugin_versions()
        return Catalog(
            plugins=tuple(plugins),
            core=core,
            release_history=tuple(history),
            plugin_versions=versions,
            failures=tuple(self.source_failures) + tuple(self.failures),
        )
