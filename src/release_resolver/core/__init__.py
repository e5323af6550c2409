"""Core business logic for release-resolver.

This module contains the version-resolution engine:
- Tag parsing and version arithmetic
- Commit classification into bump kinds
- Resolution of the next version from repository history
"""

from __future__ import annotations

from release_resolver.core.commits import (
    ApiChangeDetector,
    CancelEvent,
    RegexApiChangeDetector,
    analyze_commit_range,
    classify_subjects,
    detector_for,
)
from release_resolver.core.resolver import VersionResolution, VersionResolver, resolve_version
from release_resolver.core.version import (
    BumpKind,
    ParsedVersion,
    bump_priority,
    bump_version,
    parse_version,
    sort_tags,
    strongest_bump,
)

__all__ = [
    # Commits
    "ApiChangeDetector",
    # Version
    "BumpKind",
    "CancelEvent",
    "ParsedVersion",
    "RegexApiChangeDetector",
    # Resolver
    "VersionResolution",
    "VersionResolver",
    "analyze_commit_range",
    "bump_priority",
    "bump_version",
    "classify_subjects",
    "detector_for",
    "parse_version",
    "resolve_version",
    "sort_tags",
    "strongest_bump",
]
