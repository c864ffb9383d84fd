#!/usr/bin/env python3
"""
Example script showing how to build catalogs programmatically.
"""

from datetime import datetime, timezone
from pathlib import Path

from update_center.assembler import CatalogAssembler
from update_center.config import CatalogConfig, build_repository
from update_center.reporting import save_catalog
from update_center.sources import IndexRepository


INDEX = {
    "core": [
        {"version": "1.600.1", "url": "https://repo.example/war/1.600.1/core.war", "timestamp": "2015-01-20T00:00:00Z"},
        {"version": "1.601", "url": "https://repo.example/war/1.601/core.war", "timestamp": "2015-02-02T00:00:00Z"},
        {"version": "2.0.1", "url": "https://repo.example/war/2.0.1/core.war", "timestamp": "2016-05-10T00:00:00Z"},
    ],
    "plugins": {
        "foo": [
            {"version": v, "group": "org.example.plugins", "sha256": "abc",
             "url": f"https://repo.example/plugins/foo/{v}/foo.hpi",
             "timestamp": t, "requiredCore": "1.600"}
            for v, t in [
                ("1.0", "2015-01-01T00:00:00Z"),
                ("1.1-beta", "2015-03-01T00:00:00Z"),
                ("2.0", "2016-06-01T00:00:00Z"),
            ]
        ],
    },
}


def example_full_catalog():
    """Example: Every release, no filters."""
    print("="*60)
    print("Example 1: Full Catalog")
    print("="*60)

    repo = build_repository(IndexRepository(INDEX), CatalogConfig.create())
    catalog = CatalogAssembler(repo).assemble()

    for plugin in catalog.plugins:
        print(f"{plugin.name} => {plugin.latest.version}")
    print(f"core => {catalog.core.version}")


def example_capped_stable_catalog():
    """Example: LTS core, no betas, capped at 1.5."""
    print("\n" + "="*60)
    print("Example 2: Capped Stable Catalog")
    print("="*60)

    config = CatalogConfig.create(no_experimental=True, stable_core=True, cap="1.5", cap_core="1.700")
    repo = build_repository(IndexRepository(INDEX), config)
    catalog = CatalogAssembler(repo, now=datetime(2015, 3, 15, tzinfo=timezone.utc)).assemble()

    for plugin in catalog.plugins:
        print(f"{plugin.name} => {plugin.latest.version}")
    print(f"core => {catalog.core.version if catalog.core else 'none'}")

    written = save_catalog(catalog, Path("./output/example2"), pretty=True)
    for path in written.values():
        print(f"Wrote {path}")


if __name__ == "__main__":
    example_full_catalog()
    example_capped_stable_catalog()
