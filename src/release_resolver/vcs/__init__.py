"""Version-control collaborator interface."""

from __future__ import annotations

from release_resolver.vcs.base import Commit, Repository

__all__ = [
    "Commit",
    "Repository",
]
