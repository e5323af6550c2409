"""release-resolver: compute the next semantic version from git history."""

from __future__ import annotations

from release_resolver.core import (
    BumpKind,
    ParsedVersion,
    VersionResolution,
    VersionResolver,
    parse_version,
    resolve_version,
)

__version__ = "0.1.0"

__all__ = [
    "BumpKind",
    "ParsedVersion",
    "VersionResolution",
    "VersionResolver",
    "__version__",
    "parse_version",
    "resolve_version",
]
