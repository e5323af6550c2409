"""Configuration management for release-resolver."""

from __future__ import annotations

from release_resolver.config.loader import load_config
from release_resolver.config.models import (
    CommitsConfig,
    ResolverConfig,
    VersionConfig,
)

__all__ = [
    "CommitsConfig",
    "ResolverConfig",
    "VersionConfig",
    "load_config",
]
