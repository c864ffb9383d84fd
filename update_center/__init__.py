"""
Update Center Catalog Builder

Builds filtered, version-capped plugin and core catalogs from an artifact index.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
