"""Shared fixtures for release-resolver tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from release_resolver.vcs import Repository

RepoFactory = Callable[..., MagicMock]


@pytest.fixture
def make_repo() -> RepoFactory:
    """Build a mock repository answering with canned data."""

    def _make(
        tags: list[str] | None = None,
        subjects: list[str] | None = None,
        diff: str = "",
        tag_commit: str | None = "aaa111",
        first_commit: str = "000000",
    ) -> MagicMock:
        repo = MagicMock(spec=Repository)
        repo.list_tags.return_value = list(tags or [])
        repo.resolve_tag_commit.return_value = tag_commit
        repo.first_commit.return_value = first_commit
        repo.list_commit_subjects.return_value = list(
            subjects if subjects is not None else ["Some commit message"]
        )
        repo.diff.return_value = diff
        return repo

    return _make


@pytest.fixture
def project_with_config(tmp_path: Path) -> Path:
    """Create a project directory with a [tool.release-resolver] section."""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.release-resolver]
log_level = "debug"

[tool.release-resolver.version]
initial_version = "0.1.0"

[tool.release-resolver.commits]
api_language = "python"
bot_patterns = ["[bot]", "renovate"]
"""
    )
    return tmp_path
