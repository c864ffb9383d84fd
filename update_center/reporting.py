"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from .errors import ConfigurationError
from .models import Artifact, Catalog, CatalogEntry, PluginRelease, ReleaseRecord


logger = logging.getLogger(__name__)

UPDATE_CENTER_VERSION = "1"
DEFAULT_ID = "default"
DEFAULT_CONNECTION_CHECK_URL = "https://www.google.com/"
WARNINGS_FILE = "warnings.json"


def _timestamp_millis(artifact_time) -> int:
    return int(artifact_time.timestamp() * 1000)


def artifact_json(artifact: Artifact) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": artifact.name,
        "version": str(artifact.version),
        "url": artifact.url,
        "gav": artifact.gav,
        "releaseTimestamp": _timestamp_millis(artifact.released_at),
    }
    if artifact.sha256:
        data["sha256"] = artifact.sha256
    if artifact.required_core is not None:
        data["requiredCore"] = str(artifact.required_core)
    if artifact.compatible_since is not None:
        data["compatibleSinceVersion"] = artifact.compatible_since
    if artifact.sandbox_status is not None:
        data["sandboxStatus"] = artifact.sandbox_status
    if artifact.minimum_java_version is not None:
        data["minimumJavaVersion"] = str(artifact.minimum_java_version)
    return data


def plugin_json(plugin: PluginRelease) -> Dict[str, Any]:
    data = artifact_json(plugin.latest)
    data["title"] = plugin.latest.title or plugin.name
    data["wiki"] = plugin.documentation_url
    data["dependencies"] = [
        {"name": d.name, "version": d.version, "optional": d.optional}
        for d in plugin.latest.dependencies
    ]
    return data


def load_warnings(resources_dir: Path) -> List[Any]:
    """Security warnings published with the catalog, from ``warnings.json``."""
    path = resources_dir / WARNINGS_FILE
    if not path.is_file():
        logger.warning("No %s in %s, publishing no warnings", WARNINGS_FILE, resources_dir)
        return []
    try:
        with open(path, encoding="utf-8") as f:
            warnings = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid {path}: {e}") from e
    if not isinstance(warnings, list):
        raise ConfigurationError(f"{path} must contain a JSON array")
    logger.info("Loaded %d warnings from %s", len(warnings), path)
    return warnings


def update_center_json(
    catalog: Catalog,
    center_id: Optional[str] = None,
    connection_check_url: Optional[str] = None,
    warnings: Optional[Sequence[Any]] = None,
) -> Dict[str, Any]:
    root: Dict[str, Any] = {"updateCenterVersion": UPDATE_CENTER_VERSION}
    if catalog.core is not None:
        root["core"] = artifact_json(catalog.core)
    root["warnings"] = list(warnings or [])
    root["plugins"] = {p.name: plugin_json(p) for p in catalog.plugins}
    root["id"] = center_id or DEFAULT_ID
    root["connectionCheckUrl"] = connection_check_url or DEFAULT_CONNECTION_CHECK_URL
    return root


def plugin_versions_json(versions: Dict[str, CatalogEntry]) -> Dict[str, Any]:
    plugins = {}
    for name, entry in versions.items():
        plugins[name] = {
            str(a.version): dict(
                artifact_json(a),
                dependencies=[
                    {"name": d.name, "version": d.version, "optional": d.optional}
                    for d in a.dependencies
                ],
            )
            for a in entry.artifacts
        }
    return {"updateCenterVersion": UPDATE_CENTER_VERSION, "plugins": plugins}


def _release_json(record: ReleaseRecord) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if record.title is not None:
        data["title"] = record.title
        data["wiki"] = record.documentation_url or ""
    data["gav"] = record.gav
    data["timestamp"] = _timestamp_millis(record.timestamp)
    data["url"] = record.url
    data["version"] = record.version
    return data


def release_history_json(catalog: Catalog) -> Dict[str, Any]:
    return {
        "releaseHistory": [
            {
                "date": day.day.isoformat(),
                "releases": [_release_json(r) for r in day.releases],
            }
            for day in catalog.release_history
        ]
    }


def documentation_urls_json(catalog: Catalog) -> Dict[str, Any]:
    return {p.name: {"url": p.documentation_url} for p in catalog.plugins}


def write_json(data: Dict[str, Any], path: Path, pretty: bool = False) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        if pretty:
            json.dump(data, f, indent=2)
        else:
            json.dump(data, f, separators=(",", ":"))
    return path


def write_text(text: str, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def save_catalog(
    catalog: Catalog,
    output_dir: Path,
    center_id: Optional[str] = None,
    connection_check_url: Optional[str] = None,
    pretty: bool = False,
    warnings: Optional[Sequence[Any]] = None,
) -> Dict[str, Path]:
    """Write the catalog documents into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written = {
        "update_center": write_json(
            update_center_json(catalog, center_id, connection_check_url, warnings),
            output_dir / "update-center.actual.json",
            pretty,
        ),
        "documentation_urls": write_json(
            documentation_urls_json(catalog),
            output_dir / "plugin-documentation-urls.json",
            pretty,
        ),
    }
    if catalog.plugin_versions:
        written["plugin_versions"] = write_json(
            plugin_versions_json(catalog.plugin_versions),
            output_dir / "plugin-versions.json",
            pretty,
        )
    if catalog.release_history:
        written["release_history"] = write_json(
            release_history_json(catalog),
            output_dir / "release-history.json",
            pretty,
        )
    if catalog.core is not None:
        written["latest_core"] = write_text(
            str(catalog.core.version), output_dir / "latestCore.txt"
        )
    return written


def write_plugin_count(catalog: Catalog, path: Path) -> Path:
    return write_text(str(len(catalog.plugins)), path)


def catalog_frame(catalog: Catalog) -> pd.DataFrame:
    rows = [
        {
            "plugin": p.name,
            "latest_version": str(p.latest.version),
            "num_versions": len(p.entry.artifacts),
            "required_core": str(p.latest.required_core) if p.latest.required_core else None,
            "released_at": p.latest.released_at,
            "experimental": p.latest.version.is_prerelease,
            "documentation_url": p.documentation_url,
        }
        for p in catalog.plugins
    ]
    columns = [
        "plugin",
        "latest_version",
        "num_versions",
        "required_core",
        "released_at",
        "experimental",
        "documentation_url",
    ]
    return pd.DataFrame(rows, columns=columns)


def export_summary_csv(catalog: Catalog, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    df = catalog_frame(catalog)
    if len(df) and isinstance(df["released_at"].dtype, pd.DatetimeTZDtype):
        df["released_at"] = df["released_at"].dt.tz_convert("UTC").dt.tz_localize(None)
    df.to_csv(path, index=False)
    return path


def print_summary(catalog: Catalog, output_dir: Path) -> None:
    logger.info("=" * 60)
    logger.info("CATALOG RESULTS")
    logger.info("=" * 60)
    logger.info("Plugins: %d", len(catalog.plugins))
    if catalog.core is not None:
        logger.info("Core: %s", catalog.core.version)
    else:
        logger.info("Core: none")
    logger.info("Release history days: %d", len(catalog.release_history))
    logger.info("Skipped releases: %d", len(catalog.failures))
    logger.info("Output: %s", output_dir)
    logger.info("=" * 60)
