"""Version-control collaborator contract.

The resolver never runs git itself. It talks to an object implementing
:class:`Repository`, which is bound to a single repository and answers the
handful of questions the resolver asks. Implementations decide how (git
subprocess, libgit2, a hosted API, an in-memory fake for tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Commit:
    """A single commit as reported by the collaborator."""

    sha: str
    subject: str
    author_name: str

    @classmethod
    def from_log_line(cls, line: str) -> Commit | None:
        """Parse a ``%h|%s|%aN`` log line.

        Returns None for lines that do not carry all three fields.
        """
        parts = line.strip().split("|")
        if len(parts) < 3:
            return None
        return cls(sha=parts[0], subject=parts[1], author_name=parts[2])


@runtime_checkable
class Repository(Protocol):
    """Operations the resolver needs from a repository.

    ``list_tags`` must return tags newest first, ranking prerelease
    suffixes ``-alpha < -beta < -rc < -pre`` below the matching release
    (see :func:`release_resolver.core.version.sort_tags`).
    ``list_commit_subjects`` must keep the natural log order.
    """

    def list_tags(self) -> list[str]: ...

    def resolve_tag_commit(self, tag: str) -> str | None: ...

    def first_commit(self) -> str: ...

    def list_commit_subjects(self, commit_range: str) -> list[str]: ...

    def diff(self, commit_range: str, path_filter: str | None = None) -> str: ...
