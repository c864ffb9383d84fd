"""
Error types raised while building the update-center catalog.
"""

from __future__ import annotations

from typing import Optional


class UpdateCenterError(Exception):
    """Base class for catalog build errors."""


class MalformedVersionError(UpdateCenterError, ValueError):
    """A version string could not be parsed."""

    def __init__(self, text: object, reason: str = "not a dotted version") -> None:
        self.text = text
        super().__init__(f"Malformed version {text!r}: {reason}")


class ConfigurationError(UpdateCenterError, ValueError):
    """Invalid run configuration."""


class ArtifactResolutionError(UpdateCenterError):
    """Metadata for a single artifact could not be resolved.

    This is a per-item failure: the artifact is excluded and the run goes on.
    """

    def __init__(self, name: str, version: Optional[str], reason: str) -> None:
        self.name = name
        self.version = version
        self.reason = reason
        label = f"{name}:{version}" if version else name
        super().__init__(f"Failed to resolve {label}: {reason}")
