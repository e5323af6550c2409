"""Tests for version resolution against a mock repository."""

from __future__ import annotations

import threading

import pytest

from release_resolver.config.models import ResolverConfig, VersionConfig
from release_resolver.core.resolver import VersionResolver, resolve_version
from release_resolver.core.version import BumpKind
from release_resolver.exceptions import ResolutionCancelledError


class TestResolveVersion:
    """Tests for resolve_version() end to end."""

    def test_no_tags_uses_fallback(self, make_repo):
        """A repository without tags starts from the fallback prerelease."""
        repo = make_repo(tags=[], subjects=["Initial commit [patch]"])

        result = resolve_version(repo, "abc123")

        assert result.using_fallback_tag
        assert result.last_tag == "v1.0.0-pre.0"
        assert result.version == "1.0.0"
        assert result.bump_kind == BumpKind.PATCH
        assert result.last_tag_commit == "000000"
        assert result.commit_range == "000000..abc123"
        repo.resolve_tag_commit.assert_not_called()

    def test_no_tags_prerelease(self, make_repo):
        """Only noise on a fresh repository yields the first prerelease."""
        repo = make_repo(tags=[], subjects=["Merge pull request #1 from a/b"])

        result = resolve_version(repo, "abc123")

        assert result.version == "1.0.0-pre.1"
        assert result.is_prerelease

    def test_custom_initial_version(self, make_repo):
        """initial_version seeds the fallback tag."""
        repo = make_repo(tags=[], subjects=["First commit [patch]"])

        result = resolve_version(repo, "abc123", initial_version="0.1.0")

        assert result.using_fallback_tag
        assert result.version == "0.1.0"

    def test_initial_version_with_v_prefix(self, make_repo):
        """A leading v on initial_version is dropped, as in the config."""
        repo = make_repo(tags=[], subjects=["Initial [patch]"])

        result = resolve_version(repo, "abc123", initial_version=" v2.0.0")

        assert result.last_tag == "v2.0.0-pre.0"
        assert result.last_version == "2.0.0-pre.0"
        assert result.version == "2.0.0"
        assert VersionConfig(initial_version="v2.0.0").initial_version == "2.0.0"

    def test_initial_version_from_config(self, make_repo):
        """Without an explicit argument the configured initial version is used."""
        repo = make_repo(tags=[], subjects=["First commit [patch]"])
        config = ResolverConfig(version=VersionConfig(initial_version="2.5.0"))

        result = resolve_version(repo, "abc123", config=config)

        assert result.version == "2.5.0"

    def test_major_bump(self, make_repo):
        """[major] on a stable tag bumps major."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Breaking change [major]"])

        result = resolve_version(repo, "abc123")

        assert result.version == "2.0.0"
        assert result.bump_kind == BumpKind.MAJOR
        assert (result.parsed.major, result.parsed.minor, result.parsed.patch) == (2, 0, 0)
        assert not result.is_prerelease

    def test_minor_bump(self, make_repo):
        """[minor] on a stable tag bumps minor."""
        repo = make_repo(tags=["v1.2.3"], subjects=["New feature [minor]"])

        assert resolve_version(repo, "abc123").version == "1.3.0"

    def test_patch_bump(self, make_repo):
        """[patch] on a stable tag bumps patch."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Bug fix [patch]"])

        assert resolve_version(repo, "abc123").version == "1.2.4"

    def test_new_prerelease(self, make_repo):
        """[pre] on a stable tag starts a prerelease cycle."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Experimental feature [pre]"])

        result = resolve_version(repo, "abc123")

        assert result.version == "1.2.4-pre.1"
        assert result.parsed.prerelease_number == 1

    def test_release_from_prerelease(self, make_repo):
        """[patch] on a prerelease ships it without incrementing patch."""
        repo = make_repo(tags=["v1.2.3-pre.1"], subjects=["Ready for release [patch]"])

        result = resolve_version(repo, "abc123")

        assert result.version == "1.2.3"
        assert result.was_prerelease
        assert not result.is_prerelease

    def test_prerelease_label_inherited(self, make_repo):
        """Prerelease bumps keep the previous label."""
        repo = make_repo(tags=["v1.0.0-alpha.5"], subjects=["More alpha work [pre]"])

        result = resolve_version(repo, "abc123")

        assert result.version == "1.0.0-alpha.6"
        assert result.parsed.prerelease_label == "alpha"

    def test_uses_newest_tag(self, make_repo):
        """The first tag from the collaborator is the starting point."""
        repo = make_repo(tags=["v2.0.0", "v1.9.0"], subjects=["Fix [patch]"])

        result = resolve_version(repo, "abc123")

        assert result.last_tag == "v2.0.0"
        assert result.version == "2.0.1"
        repo.resolve_tag_commit.assert_called_once_with("v2.0.0")

    def test_skip_keeps_version(self, make_repo):
        """An empty range keeps the previous version verbatim."""
        repo = make_repo(tags=["v1.2.3-rc.4"], subjects=[])

        result = resolve_version(repo, "abc123")

        assert result.bump_kind == BumpKind.SKIP
        assert result.version == "1.2.3-rc.4"
        assert result.parsed.prerelease_number == 4
        assert not result.should_release

    def test_resolution_properties(self, make_repo):
        """The resolution records where it came from."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Bug fix [patch]"])

        result = resolve_version(repo, "abc123")

        assert result.last_tag == "v1.2.3"
        assert result.last_version == "1.2.3"
        assert not result.was_prerelease
        assert result.reason
        assert result.first_commit == "000000"
        assert result.last_commit == "abc123"
        assert result.last_tag_commit == "aaa111"
        assert result.commit_range == "aaa111..abc123"
        assert result.should_release
        assert result.tag == "v1.2.4"

    @pytest.mark.parametrize("tag_commit", [None, ""])
    def test_missing_tag_commit_falls_back_to_first_commit(self, make_repo, tag_commit):
        """An unresolvable tag anchors the range at the first commit."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Fix [patch]"], tag_commit=tag_commit)

        result = resolve_version(repo, "abc123")

        assert result.last_tag_commit == "000000"
        assert result.commit_range == "000000..abc123"
        repo.list_commit_subjects.assert_called_once_with("000000..abc123")

    def test_forced_bump_skips_classifier(self, make_repo):
        """A forced bump is applied without reading commits."""
        repo = make_repo(tags=["v1.2.3"])

        result = resolve_version(repo, "abc123", forced_bump=BumpKind.MINOR)

        assert result.version == "1.3.0"
        assert result.bump_kind == BumpKind.MINOR
        assert "forced" in result.reason.lower()
        repo.list_commit_subjects.assert_not_called()
        repo.diff.assert_not_called()

    def test_forced_skip(self, make_repo):
        """Forcing skip keeps the version even with marked commits."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Breaking [major]"])

        result = resolve_version(repo, "abc123", forced_bump=BumpKind.SKIP)

        assert result.version == "1.2.3"
        assert not result.should_release

    def test_forced_bump_from_config(self, make_repo):
        """A forced bump can come from configuration."""
        repo = make_repo(tags=["v1.2.3"])
        config = ResolverConfig(version=VersionConfig(forced_bump="major"))

        result = resolve_version(repo, "abc123", config=config)

        assert result.version == "2.0.0"
        repo.list_commit_subjects.assert_not_called()

    def test_idempotent(self, make_repo):
        """Resolving twice over the same snapshot gives the same result."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Refactor parser"], diff="+public class Parser\n")

        assert resolve_version(repo, "abc123") == resolve_version(repo, "abc123")

    def test_to_dict(self, make_repo):
        """to_dict exposes the resolution for pipelines."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Fix [patch]"])

        data = resolve_version(repo, "abc123").to_dict()

        assert data["version"] == "1.2.4"
        assert data["bump_kind"] == "patch"
        assert data["parsed"]["string"] == "1.2.4"
        assert data["should_release"] is True


class TestCancellation:
    """Tests for cooperative cancellation."""

    def test_cancelled_before_start(self, make_repo):
        """A pre-set event aborts before any repository call."""
        repo = make_repo(tags=["v1.2.3"])
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(ResolutionCancelledError) as excinfo:
            resolve_version(repo, "abc123", cancel_event=cancel)

        assert excinfo.value.step == "list_tags"
        repo.list_tags.assert_not_called()

    def test_cancelled_mid_resolution(self, make_repo):
        """Cancellation during a call stops at the next call boundary."""
        cancel = threading.Event()
        repo = make_repo(tags=["v1.2.3"])
        repo.first_commit.side_effect = lambda: (cancel.set(), "000000")[1]

        with pytest.raises(ResolutionCancelledError) as excinfo:
            resolve_version(repo, "abc123", cancel_event=cancel)

        assert excinfo.value.step == "resolve_tag_commit"
        repo.list_commit_subjects.assert_not_called()

    def test_unset_event_resolves(self, make_repo):
        """An event that is never set does not interfere."""
        repo = make_repo(tags=["v1.2.3"], subjects=["Fix [patch]"])

        result = resolve_version(repo, "abc123", cancel_event=threading.Event())

        assert result.version == "1.2.4"


class TestCollaboratorErrors:
    """Collaborator failures are not swallowed."""

    def test_repository_error_propagates(self, make_repo):
        """Errors raised by the repository reach the caller unchanged."""
        repo = make_repo()
        repo.list_tags.side_effect = FileNotFoundError("not a git repository")

        with pytest.raises(FileNotFoundError, match="not a git repository"):
            resolve_version(repo, "abc123")


class TestVersionResolver:
    """Tests for the VersionResolver wrapper."""

    def test_resolve_uses_bound_repo_and_config(self, make_repo):
        """VersionResolver forwards its repository and configuration."""
        repo = make_repo(tags=[], subjects=["Start [patch]"])
        resolver = VersionResolver(repo, ResolverConfig(version=VersionConfig(initial_version="0.3.0")))

        assert resolver.resolve("abc123").version == "0.3.0"

    def test_resolve_forced(self, make_repo):
        """Per-call forced bumps are honoured."""
        repo = make_repo(tags=["v0.3.0"])
        resolver = VersionResolver(repo)

        result = resolver.resolve("abc123", forced_bump=BumpKind.PRERELEASE)

        assert result.version == "0.3.1-pre.1"
