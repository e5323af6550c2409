"""Commit classification.

Decides how far a commit range should move the version. Explicit markers
written by authors always win; without them the decision falls back to a
heuristic over the range's diff.

Markers (case-insensitive, anywhere in the subject)::

    [skip ci] / [ci skip]  on every commit  -> skip
    [major]                on any commit    -> major
    [minor]                                 -> minor
    [patch]                                 -> patch
    [pre]                                   -> prerelease

Unmarked ranges::

    only bot/merge commits                   -> prerelease
    public API added or removed in the diff  -> minor
    anything else                            -> patch
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import structlog

from release_resolver.core.version import BumpKind, strongest_bump
from release_resolver.exceptions import ConfigValidationError, ResolutionCancelledError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from release_resolver.config.models import CommitsConfig
    from release_resolver.vcs.base import Repository

logger = structlog.get_logger(__name__)

# Checked in this order within a single subject; only the first hit counts.
_LESSER_MARKERS: tuple[tuple[str, BumpKind], ...] = (
    ("[minor]", BumpKind.MINOR),
    ("[patch]", BumpKind.PATCH),
    ("[pre]", BumpKind.PRERELEASE),
)

CSHARP_API_PATTERNS: tuple[str, ...] = (
    r"^\+\s*(public|protected)\s+(class|interface|enum|struct|record)\s+\w+",
    r"^\+\s*(public|protected)\s+\w+\s+\w+\s*\(",
    r"^\+\s*(public|protected)\s+\w+(\s+\w+)*\s*\{",
    r"^\-\s*(public|protected)\s+(class|interface|enum|struct|record)\s+\w+",
    r"^\-\s*(public|protected)\s+\w+\s+\w+\s*\(",
    r"^\-\s*(public|protected)\s+\w+(\s+\w+)*\s*\{",
    r"^\+\s*public\s+const\s",
    r"^\-\s*public\s+const\s",
)

# Top-level only: indented definitions are implementation details.
PYTHON_API_PATTERNS: tuple[str, ...] = (
    r"^[+-](async\s+)?def\s+[A-Za-z]\w*\s*\(",
    r"^[+-]class\s+[A-Za-z]\w*",
    r"^[+-][A-Z][A-Z0-9_]*\s*(:[^=]+)?=",
)


class CancelEvent(Protocol):
    """Cooperative cancellation flag, e.g. a threading.Event."""

    def is_set(self) -> bool: ...


class ApiChangeDetector(Protocol):
    """Decides whether a diff touches the public API surface."""

    path_filter: str

    def has_api_changes(self, diff: str) -> bool: ...


@dataclass(frozen=True)
class RegexApiChangeDetector:
    """Detect API changes by matching added/removed diff lines.

    Args:
        patterns: Multiline regexes; any match means the API changed
        path_filter: Pathspec the diff is restricted to
    """

    patterns: tuple[str, ...]
    path_filter: str

    def has_api_changes(self, diff: str) -> bool:
        if not diff:
            return False
        return any(re.search(pattern, diff, re.MULTILINE) for pattern in self.patterns)


_DETECTORS: dict[str, RegexApiChangeDetector] = {
    "csharp": RegexApiChangeDetector(CSHARP_API_PATTERNS, "*.cs"),
    "python": RegexApiChangeDetector(PYTHON_API_PATTERNS, "*.py"),
}


def detector_for(language: str) -> RegexApiChangeDetector:
    """Return the built-in API change detector for a language.

    Raises:
        ConfigValidationError: If no detector exists for the language
    """
    try:
        return _DETECTORS[language]
    except KeyError as e:
        known = ", ".join(sorted(_DETECTORS))
        raise ConfigValidationError(
            f"No API change detector for {language!r}. Available: {known}"
        ) from e


def is_skip_ci(subject: str, patterns: Iterable[str]) -> bool:
    """Check whether a subject carries a skip-ci marker."""
    return any(re.search(p, subject, re.IGNORECASE) for p in patterns)


def is_noise_commit(subject: str, config: CommitsConfig) -> bool:
    """Check whether a subject looks like automation or merge output."""
    lowered = subject.lower()
    if any(p.lower() in lowered for p in config.bot_patterns):
        return True
    return any(re.search(p, subject, re.IGNORECASE) for p in config.merge_patterns)


def find_explicit_bump(subjects: Sequence[str]) -> tuple[BumpKind, str] | None:
    """Find the bump requested by explicit markers, if any.

    ``[major]`` anywhere wins outright. Otherwise the first subject
    carrying each lesser marker is remembered and the strongest of them
    is returned, with that subject quoted in the reason.
    """
    for subject in subjects:
        if "[major]" in subject.lower():
            return BumpKind.MAJOR, f"Explicit [major] tag found in commit message: {subject}"

    reasons: dict[BumpKind, str] = {}
    for subject in subjects:
        lowered = subject.lower()
        for marker, kind in _LESSER_MARKERS:
            if marker in lowered:
                reasons.setdefault(kind, f"Explicit {marker} tag found in commit message: {subject}")
                break

    kind = strongest_bump(reasons)
    if kind is None:
        return None
    return kind, reasons[kind]


def classify_subjects(
    subjects: Sequence[str],
    load_diff: Callable[[], str],
    *,
    config: CommitsConfig | None = None,
    detector: ApiChangeDetector | None = None,
) -> tuple[BumpKind, str]:
    """Classify commit subjects into a bump kind and a reason.

    Args:
        subjects: Commit subjects in log order
        load_diff: Returns the range diff; called at most once, and only
            when the range holds meaningful (non-noise) commits
        config: Classification settings (defaults when omitted)
        detector: API change detector (chosen from ``config`` when omitted)

    Returns:
        Tuple of (bump kind, human-readable reason)
    """
    if config is None:
        from release_resolver.config.models import CommitsConfig

        config = CommitsConfig()

    if not subjects:
        return BumpKind.SKIP, "No commits found in the specified range"

    if all(is_skip_ci(s, config.skip_ci_patterns) for s in subjects):
        return BumpKind.SKIP, "All commits contain [skip ci] tag, skipping release"

    explicit = find_explicit_bump(subjects)
    if explicit is not None:
        return explicit

    meaningful = [s for s in subjects if not is_noise_commit(s, config)]
    if not meaningful:
        return BumpKind.PRERELEASE, "No significant changes detected"

    detector = detector or detector_for(config.api_language)
    if detector.has_api_changes(load_diff()):
        return BumpKind.MINOR, "Public API changes detected (additions, removals, or modifications)"
    return BumpKind.PATCH, "Found changes warranting at least a patch version"


def analyze_commit_range(
    repo: Repository,
    commit_range: str,
    *,
    config: CommitsConfig | None = None,
    detector: ApiChangeDetector | None = None,
    cancel_event: CancelEvent | None = None,
) -> tuple[BumpKind, str]:
    """Fetch a range's commits from the repository and classify them.

    Args:
        repo: Repository collaborator
        commit_range: Range in ``from..to`` form
        config: Classification settings
        detector: API change detector override
        cancel_event: Object with ``is_set()``; checked before each call

    Raises:
        ResolutionCancelledError: If ``cancel_event`` is set
    """
    if config is None:
        from release_resolver.config.models import CommitsConfig

        config = CommitsConfig()
    detector = detector or detector_for(config.api_language)

    check_cancelled(cancel_event, "list_commit_subjects")
    subjects = repo.list_commit_subjects(commit_range)
    logger.debug("commit_subjects_loaded", commit_range=commit_range, count=len(subjects))

    def load_diff() -> str:
        check_cancelled(cancel_event, "diff")
        diff = repo.diff(commit_range, detector.path_filter) or ""
        logger.debug("range_diff_loaded", path_filter=detector.path_filter, size=len(diff))
        return diff

    return classify_subjects(subjects, load_diff, config=config, detector=detector)


def check_cancelled(cancel_event: CancelEvent | None, step: str) -> None:
    """Raise if the caller has cancelled the resolution."""
    if cancel_event is not None and cancel_event.is_set():
        logger.info("resolution_cancelled", step=step)
        raise ResolutionCancelledError(step)
