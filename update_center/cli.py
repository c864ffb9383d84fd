"""
Command-line interface for the update-center catalog builder.
"""

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import List, Optional

import requests

from .assembler import (
    DEFAULT_PLUGIN_SITE,
    CatalogAssembler,
    DefaultMetadataResolver,
    MappingMetadataResolver,
)
from .config import CatalogConfig, build_repository
from .errors import UpdateCenterError
from .interfaces import FailureCollector
from .models import Catalog
from .reporting import (
    export_summary_csv,
    load_warnings,
    print_summary,
    save_catalog,
    write_plugin_count,
)
from .sources import load_index


logger = logging.getLogger(__name__)


def build_parser(
    index: Optional[str] = None,
    cache_dir: Optional[str] = None,
    resources_dir: str = "resources",
) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build update-center catalog metadata from an artifact index"
    )

    parser.add_argument(
        "--index",
        default=index,
        help="Path or http(s) URL of the artifact index JSON"
    )

    parser.add_argument(
        "--cache-dir",
        default=cache_dir,
        help="Directory for downloaded index files"
    )

    parser.add_argument(
        "--resources-dir",
        default=resources_dir,
        help="Directory containing warnings.json. Default: resources"
    )

    parser.add_argument(
        "--output-dir",
        default="./output",
        help="Output directory for catalog documents. Default: ./output"
    )

    parser.add_argument(
        "--id",
        dest="center_id",
        default=None,
        help="Identifier of this update center"
    )

    parser.add_argument(
        "--connection-check-url",
        default=None,
        help="URL of an always-up server used for connection checks"
    )

    parser.add_argument(
        "--max-plugins",
        type=int,
        default=None,
        help="For testing purposes. Limit the number of plugins to this many"
    )

    parser.add_argument(
        "--experimental-only",
        action="store_true",
        help="Include alpha/beta releases only"
    )

    parser.add_argument(
        "--no-experimental",
        action="store_true",
        help="Exclude alpha/beta releases"
    )

    parser.add_argument(
        "--stable-core",
        action="store_true",
        help="Limit core releases to stable (LTS) releases with three version components"
    )

    parser.add_argument(
        "--cap",
        default=None,
        help="Cap plugin versions at this version"
    )

    parser.add_argument(
        "--cap-core",
        default=None,
        help="Cap core versions at this version. Defaults to --cap"
    )

    parser.add_argument(
        "--java-version",
        default=None,
        help="Exclude plugins whose minimum Java version is newer than this"
    )

    parser.add_argument(
        "--max-required-core",
        default=None,
        help="Exclude plugin releases requiring a newer core than this"
    )

    parser.add_argument(
        "--plugin-site",
        default=DEFAULT_PLUGIN_SITE,
        help=f"Base URL of the plugin site. Default: {DEFAULT_PLUGIN_SITE}"
    )

    parser.add_argument(
        "--documentation-urls",
        default=None,
        help="JSON file mapping plugin names to documentation URLs"
    )

    parser.add_argument(
        "--skip-release-history",
        action="store_true",
        help="Skip generation of release history"
    )

    parser.add_argument(
        "--skip-plugin-versions",
        action="store_true",
        help="Skip generation of plugin versions"
    )

    parser.add_argument(
        "--plugin-count",
        default=None,
        help="Write the number of listed plugins to this file"
    )

    parser.add_argument(
        "--summary-csv",
        default=None,
        help="Write a CSV summary of the plugin catalog to this file"
    )

    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print the JSON documents"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def _read_arguments_file(path: Path) -> List[List[str]]:
    """One argument list per non-blank line, ignoring # comments."""
    invocations = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            invocations.append(shlex.split(line))
    return invocations


def run(args: argparse.Namespace) -> Catalog:
    """Build and write one catalog."""
    # Validated before anything is read or written.
    config = CatalogConfig.from_args(args)
    if not args.index:
        raise UpdateCenterError("--index is required")
    warnings = load_warnings(Path(args.resources_dir))

    source_errors = FailureCollector()
    base = load_index(
        args.index,
        Path(args.cache_dir) if args.cache_dir else None,
        on_error=source_errors,
    )
    repository = build_repository(base, config)

    metadata = DefaultMetadataResolver(args.plugin_site)
    if args.documentation_urls:
        metadata = MappingMetadataResolver.from_file(
            Path(args.documentation_urls), fallback=metadata
        )

    assembler = CatalogAssembler(
        repository,
        metadata=metadata,
        plugin_site=args.plugin_site,
        skip_release_history=args.skip_release_history,
        skip_plugin_versions=args.skip_plugin_versions,
        source_failures=source_errors.failures,
    )
    catalog = assembler.assemble()

    output_dir = Path(args.output_dir)
    save_catalog(
        catalog,
        output_dir,
        center_id=args.center_id,
        connection_check_url=args.connection_check_url,
        pretty=args.pretty,
        warnings=warnings,
    )
    if args.plugin_count:
        write_plugin_count(catalog, Path(args.plugin_count))
    if args.summary_csv:
        export_summary_csv(catalog, Path(args.summary_csv))

    print_summary(catalog, output_dir)
    return catalog


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    parser.add_argument(
        "--arguments-file",
        default=None,
        help="Run one build per line of this file. Each line is a full argument list"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.arguments_file:
        try:
            invocations = _read_arguments_file(Path(args.arguments_file))
        except OSError as e:
            logger.error("Cannot read arguments file: %s", e)
            return 1
    else:
        invocations = [None]

    index, cache_dir, resources_dir = args.index, args.cache_dir, args.resources_dir
    for invocation in invocations:
        if invocation is not None:
            logger.info("Running with args: %s", " ".join(invocation))
            # Fresh parser per line; index, cache and resources locations come from the command line.
            parser = build_parser(index=index, cache_dir=cache_dir, resources_dir=resources_dir)
            args = parser.parse_args(invocation)
        try:
            run(args)
        except UpdateCenterError as e:
            logger.error("Catalog build failed: %s", e)
            return 1
        except (OSError, ValueError, requests.RequestException) as e:
            logger.error("Cannot build catalog: %s", e)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
