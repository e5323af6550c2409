"""Version resolution.

Combines the repository's latest tag with a classification of the commits
made since it, and produces the next version. Every call re-reads the
repository; nothing is cached between resolutions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from release_resolver.core.commits import analyze_commit_range, check_cancelled
from release_resolver.core.version import BumpKind, ParsedVersion, bump_version, parse_version

if TYPE_CHECKING:
    from release_resolver.config.models import ResolverConfig
    from release_resolver.core.commits import ApiChangeDetector, CancelEvent
    from release_resolver.vcs.base import Repository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class VersionResolution:
    """Outcome of resolving the next version.

    Attributes:
        version: New version string (equal to ``last_version`` on skip)
        parsed: New version split into its parts
        last_tag: Tag the range starts from (possibly the fallback tag)
        last_version: ``last_tag`` without its ``v`` prefix
        was_prerelease: Whether ``last_tag`` was a prerelease
        bump_kind: Bump that was applied
        reason: Why that bump was chosen
        first_commit: First commit of the repository
        last_commit: Commit the version was resolved for
        last_tag_commit: Commit ``last_tag`` points at
        using_fallback_tag: True when the repository had no tags
        commit_range: Range that was analysed
    """

    version: str
    parsed: ParsedVersion
    last_tag: str
    last_version: str
    was_prerelease: bool
    bump_kind: BumpKind
    reason: str
    first_commit: str
    last_commit: str
    last_tag_commit: str
    using_fallback_tag: bool
    commit_range: str

    @property
    def should_release(self) -> bool:
        """Whether a new release should be cut."""
        return self.bump_kind is not BumpKind.SKIP

    @property
    def is_prerelease(self) -> bool:
        return self.parsed.is_prerelease

    @property
    def tag(self) -> str:
        return f"v{self.version}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "parsed": self.parsed.to_dict(),
            "last_tag": self.last_tag,
            "last_version": self.last_version,
            "was_prerelease": self.was_prerelease,
            "bump_kind": str(self.bump_kind),
            "reason": self.reason,
            "first_commit": self.first_commit,
            "last_commit": self.last_commit,
            "last_tag_commit": self.last_tag_commit,
            "using_fallback_tag": self.using_fallback_tag,
            "commit_range": self.commit_range,
            "should_release": self.should_release,
        }


def resolve_version(
    repo: Repository,
    commit: str,
    *,
    initial_version: str | None = None,
    forced_bump: BumpKind | None = None,
    config: ResolverConfig | None = None,
    detector: ApiChangeDetector | None = None,
    cancel_event: CancelEvent | None = None,
) -> VersionResolution:
    """Resolve the next version for ``commit``.

    Args:
        repo: Repository collaborator
        commit: Commit being released
        initial_version: Seed for the fallback tag when the repository has
            no tags, with or without a leading ``v`` (defaults to
            ``config.version.initial_version``)
        forced_bump: Bump to apply without classifying commits (defaults
            to ``config.version.forced_bump``)
        config: Resolver configuration (defaults when omitted)
        detector: API change detector override
        cancel_event: Object with ``is_set()``; checked before each
            repository call

    Returns:
        The resolution. A skip keeps the previous version.

    Raises:
        ResolutionCancelledError: If ``cancel_event`` is set
    """
    if config is None:
        from release_resolver.config.models import ResolverConfig

        config = ResolverConfig()
    if initial_version:
        initial_version = initial_version.strip().lstrip("v")
    initial_version = initial_version or config.version.initial_version
    if forced_bump is None:
        forced_bump = config.version.forced_bump

    check_cancelled(cancel_event, "list_tags")
    tags = repo.list_tags()
    logger.info("tags_found", count=len(tags))

    using_fallback_tag = not tags
    if using_fallback_tag:
        last_tag = f"v{initial_version}-pre.0"
        logger.info("fallback_tag_used", tag=last_tag)
    else:
        last_tag = tags[0]
        logger.info("last_tag_selected", tag=last_tag)

    last_version = last_tag.lstrip("v")
    previous = parse_version(last_version)

    check_cancelled(cancel_event, "first_commit")
    first_commit = repo.first_commit() or ""

    last_tag_commit: str | None = None
    if not using_fallback_tag:
        check_cancelled(cancel_event, "resolve_tag_commit")
        last_tag_commit = repo.resolve_tag_commit(last_tag)
    if not last_tag_commit:
        last_tag_commit = first_commit

    commit_range = f"{last_tag_commit}..{commit}"
    logger.info("commit_range_analyzed", commit_range=commit_range)

    if forced_bump is not None:
        bump_kind = forced_bump
        reason = f"Forced version bump: {forced_bump}"
    else:
        bump_kind, reason = analyze_commit_range(
            repo,
            commit_range,
            config=config.commits,
            detector=detector,
            cancel_event=cancel_event,
        )
    logger.info("bump_decided", bump_kind=str(bump_kind), reason=reason, forced=forced_bump is not None)

    if bump_kind is BumpKind.SKIP:
        parsed = previous
        version = last_version
    else:
        parsed = bump_version(previous, bump_kind)
        version = str(parsed)

    logger.info("version_decided", previous=last_version, version=version)

    return VersionResolution(
        version=version,
        parsed=parsed,
        last_tag=last_tag,
        last_version=last_version,
        was_prerelease=previous.is_prerelease,
        bump_kind=bump_kind,
        reason=reason,
        first_commit=first_commit,
        last_commit=commit,
        last_tag_commit=last_tag_commit,
        using_fallback_tag=using_fallback_tag,
        commit_range=commit_range,
    )


class VersionResolver:
    """Resolve versions repeatedly against one repository.

    Holds no state beyond its collaborator and configuration; every
    :meth:`resolve` call starts from scratch.
    """

    def __init__(
        self,
        repo: Repository,
        config: ResolverConfig | None = None,
        detector: ApiChangeDetector | None = None,
    ) -> None:
        if config is None:
            from release_resolver.config.models import ResolverConfig

            config = ResolverConfig()
        self.repo = repo
        self.config = config
        self.detector = detector

    def resolve(
        self,
        commit: str,
        *,
        initial_version: str | None = None,
        forced_bump: BumpKind | None = None,
        cancel_event: CancelEvent | None = None,
    ) -> VersionResolution:
        return resolve_version(
            self.repo,
            commit,
            initial_version=initial_version,
            forced_bump=forced_bump,
            config=self.config,
            detector=self.detector,
            cancel_event=cancel_event,
        )
