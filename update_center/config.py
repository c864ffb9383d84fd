"""
Per-run configuration and the decorator chain built from it.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import ConfigurationError, MalformedVersionError
from .interfaces import ArtifactRepository
from .java import JavaSpecificationVersion
from .predicates import JavaCompatible, Predicate, RequiredCoreAtMost
from .versions import VersionNumber
from .wrappers import (
    ExperimentalOnly,
    NoExperimental,
    PredicateFiltered,
    StableCoreOnly,
    Truncated,
    VersionCapped,
)


logger = logging.getLogger(__name__)


class ExperimentalMode(Enum):
    ALL = "all"
    ONLY = "experimental-only"
    EXCLUDE = "no-experimental"


def _parse_cap(option: str, value: Optional[str]) -> Optional[VersionNumber]:
    if value is None:
        return None
    try:
        return VersionNumber(value)
    except MalformedVersionError as e:
        raise ConfigurationError(f"Invalid {option} version {value!r}") from e


@dataclass(frozen=True)
class CatalogConfig:
    """Immutable settings for one catalog build."""

    max_plugins: Optional[int] = None
    experimental: ExperimentalMode = ExperimentalMode.ALL
    stable_core: bool = False
    plugin_cap: Optional[VersionNumber] = None
    core_cap: Optional[VersionNumber] = None
    predicates: Tuple[Predicate, ...] = ()

    @property
    def effective_core_cap(self) -> Optional[VersionNumber]:
        # An unset core cap follows the plugin cap.
        if self.core_cap is not None:
            return self.core_cap
        return self.plugin_cap

    @classmethod
    def create(
        cls,
        max_plugins: Optional[int] = None,
        experimental_only: bool = False,
        no_experimental: bool = False,
        stable_core: bool = False,
        cap: Optional[str] = None,
        cap_core: Optional[str] = None,
        java_version: Optional[str] = None,
        max_required_core: Optional[str] = None,
    ) -> "CatalogConfig":
        """Validate raw option values and build a configuration."""
        if max_plugins is not None and max_plugins < 0:
            raise ConfigurationError(f"max-plugins must not be negative: {max_plugins}")
        if experimental_only and no_experimental:
            raise ConfigurationError(
                "experimental-only and no-experimental are mutually exclusive"
            )

        if experimental_only:
            experimental = ExperimentalMode.ONLY
        elif no_experimental:
            experimental = ExperimentalMode.EXCLUDE
        else:
            experimental = ExperimentalMode.ALL

        predicates = []
        if java_version is not None:
            try:
                target = JavaSpecificationVersion(java_version)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
            predicates.append(JavaCompatible(target))
        if max_required_core is not None:
            predicates.append(
                RequiredCoreAtMost(_parse_cap("max-required-core", max_required_core))
            )

        return cls(
            max_plugins=max_plugins,
            experimental=experimental,
            stable_core=stable_core,
            plugin_cap=_parse_cap("cap", cap),
            core_cap=_parse_cap("cap-core", cap_core),
            predicates=tuple(predicates),
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "CatalogConfig":
        return cls.create(
            max_plugins=args.max_plugins,
            experimental_only=args.experimental_only,
            no_experimental=args.no_experimental,
            stable_core=args.stable_core,
            cap=args.cap,
            cap_core=args.cap_core,
            java_version=args.java_version,
            max_required_core=args.max_required_core,
        )


def build_repository(base: ArtifactRepository, config: CatalogConfig) -> ArtifactRepository:
    """Wrap ``base`` with the decorators selected by ``config``.

    Order: predicates, truncation, experimental split, stable core, version cap.
    The cap goes last so "latest" honours every other restriction.
    """
    repo = base
    if not any(isinstance(p, JavaCompatible) for p in config.predicates):
        logger.warning("Target Java version is not defined, Java version filters will not be applied")
    if config.predicates:
        for predicate in config.predicates:
            logger.info("Filtering plugins with %r", predicate)
        repo = PredicateFiltered(repo, *config.predicates)
    if config.max_plugins is not None:
        repo = Truncated(repo, config.max_plugins)
    if config.experimental is ExperimentalMode.ONLY:
        repo = ExperimentalOnly(repo)
    elif config.experimental is ExperimentalMode.EXCLUDE:
        repo = NoExperimental(repo)
    if config.stable_core:
        repo = StableCoreOnly(repo)
    if config.plugin_cap is not None or config.effective_core_cap is not None:
        repo = VersionCapped(repo, config.plugin_cap, config.effective_core_cap)
    return repo
