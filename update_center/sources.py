"""
Artifact repository backed by a JSON index document.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import requests
from tqdm import tqdm

from .errors import ArtifactResolutionError, MalformedVersionError
from .interfaces import ArtifactRepository, ErrorHandler, log_resolution_error
from .java import JavaSpecificationVersion
from .models import (
    Artifact,
    CatalogEntry,
    Dependency,
    ReleaseHistoryBucket,
    group_by_release_date,
    sort_by_version,
)
from .time_utils import parse_timestamp
from .versions import VersionNumber


logger = logging.getLogger(__name__)

CORE_NAME = "core"


class IndexRepository(ArtifactRepository):
    """Raw repository reading releases from an index document.

    The document has a ``core`` list of release records and a ``plugins``
    mapping from plugin name to a list of release records. Records that
    cannot be resolved are skipped and reported through ``on_error``.
    """

    def __init__(self, document: Mapping[str, Any], on_error: Optional[ErrorHandler] = None) -> None:
        self.document = document
        self.on_error = on_error or log_resolution_error
        self._plugins: Optional[Tuple[CatalogEntry, ...]] = None
        self._core: Optional[Tuple[Artifact, ...]] = None

    @classmethod
    def from_file(cls, path: Path, on_error: Optional[ErrorHandler] = None) -> "IndexRepository":
        logger.info("Loading index from %s", path)
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
        return cls(document, on_error=on_error)

    def list_plugin_entries(self) -> List[CatalogEntry]:
        if self._plugins is None:
            self._plugins = self._load_plugins()
        return list(self._plugins)

    def list_core_releases(self) -> Dict[VersionNumber, Artifact]:
        if self._core is None:
            self._core = self._load_core()
        return {a.version: a for a in self._core}

    def list_releases_by_date(self) -> List[ReleaseHistoryBucket]:
        return group_by_release_date(self.list_plugin_entries())

    def _load_plugins(self) -> Tuple[CatalogEntry, ...]:
        plugins = self.document.get("plugins") or {}
        entries = []
        for name in sorted(plugins):
            artifacts = self._load_versions(name, plugins[name], plugin=True)
            if not artifacts:
                logger.debug("No usable versions for %s", name)
                continue
            entries.append(CatalogEntry.of(name, artifacts))
        logger.info("Loaded %d plugins from index", len(entries))
        return tuple(entries)

    def _load_core(self) -> Tuple[Artifact, ...]:
        records = self.document.get("core") or []
        return tuple(sort_by_version(self._load_versions(CORE_NAME, records, plugin=False)))

    def _load_versions(self, name: str, records: Any, plugin: bool) -> List[Artifact]:
        if not isinstance(records, list):
            self._report(ArtifactResolutionError(name, None, "release list is not an array"))
            return []

        artifacts: Dict[VersionNumber, Artifact] = {}
        for record in records:
            try:
                artifact = self._parse_artifact(name, record, plugin)
            except ArtifactResolutionError as e:
                self._report(e)
                continue
            if artifact.version in artifacts:
                self._report(ArtifactResolutionError(
                    name, str(artifact.version), "duplicate version"
                ))
                continue
            artifacts[artifact.version] = artifact
        return list(artifacts.values())

    def _parse_artifact(self, name: str, record: Any, plugin: bool) -> Artifact:
        if not isinstance(record, Mapping):
            raise ArtifactResolutionError(name, None, "release record is not an object")
        if "version" not in record:
            raise ArtifactResolutionError(name, None, "missing version")

        # Malformed version strings abort the run instead of being skipped.
        version = VersionNumber(record["version"])
        try:
            released_at = parse_timestamp(record["timestamp"])
            if released_at is None:
                raise ValueError(f"bad timestamp {record['timestamp']!r}")
            url = record["url"]
            if not isinstance(url, str) or not url:
                raise ValueError(f"bad url {url!r}")
            required_core = None
            if plugin:
                required_core = VersionNumber(record["requiredCore"])
            elif record.get("requiredCore"):
                required_core = VersionNumber(record["requiredCore"])
            java = record.get("minimumJavaVersion")
            return Artifact(
                group=str(record.get("group", "")),
                name=name,
                version=version,
                url=url,
                released_at=released_at,
                required_core=required_core,
                sha256=record.get("sha256"),
                classifier=record.get("classifier"),
                compatible_since=record.get("compatibleSinceVersion"),
                sandbox_status=record.get("sandboxStatus"),
                minimum_java_version=JavaSpecificationVersion(java) if java else None,
                title=record.get("title"),
                dependencies=tuple(
                    _parse_dependency(d) for d in record.get("dependencies") or []
                ),
            )
        except MalformedVersionError:
            raise
        except KeyError as e:
            raise ArtifactResolutionError(name, str(version), f"missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise ArtifactResolutionError(name, str(version), str(e)) from e

    def _report(self, error: ArtifactResolutionError) -> None:
        self.on_error(error)


def _parse_dependency(data: Mapping[str, Any]) -> Dependency:
    return Dependency(
        name=str(data["name"]),
        version=str(data["version"]),
        optional=bool(data.get("optional", False)),
    )


def download_index(
    url: str,
    target: Path,
    session: Optional[requests.Session] = None,
) -> Path:
    """Download an index document to ``target``."""
    session = session or requests.Session()
    logger.info("Downloading index from %s", url)

    target.parent.mkdir(parents=True, exist_ok=True)
    with session.get(url, stream=True) as response:
        response.raise_for_status()
        total_size = int(response.headers.get("content-length", 0))
        with open(target, "wb") as f:
            with tqdm(total=total_size, unit="B", unit_scale=True, desc="index") as pbar:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
                    pbar.update(len(chunk))

    logger.info("Downloaded index to %s", target)
    return target


def load_index(
    location: Union[str, Path],
    cache_dir: Optional[Path] = None,
    session: Optional[requests.Session] = None,
    on_error: Optional[ErrorHandler] = None,
) -> IndexRepository:
    """Open an index from a local path or an http(s) URL."""
    location = str(location)
    if location.startswith(("http://", "https://")):
        if cache_dir is None:
            cache_dir = Path(tempfile.mkdtemp(prefix="update-center-"))
        path = download_index(location, Path(cache_dir) / "index.json", session=session)
    else:
        path = Path(location)
    return IndexRepository.from_file(path, on_error=on_error)
