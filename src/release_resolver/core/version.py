"""Version parsing and arithmetic.

Tags look like ``v1.2.3``, ``v1.2.3-pre.4`` or ``v2.0.0-beta.1``. A tag is
parsed into a :class:`ParsedVersion`, which a :class:`BumpKind` then advances
to the next version. Parsing is total: fields that cannot be read fall back
to defaults instead of raising.

Prerelease cycles work like this::

    1.2.3        + prerelease -> 1.2.4-pre.1   (start a cycle)
    1.2.4-pre.1  + prerelease -> 1.2.4-pre.2   (advance the counter)
    1.2.4-pre.2  + patch      -> 1.2.4         (ship the cycle)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from release_resolver.exceptions import InvalidBumpKindError

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_PRERELEASE_LABEL = "pre"

# Ranking used when ordering prerelease tags against each other and
# against the release they precede.
PRERELEASE_LABEL_RANK: dict[str, int] = {"alpha": 0, "beta": 1, "rc": 2, "pre": 3}
_STABLE_RANK = len(PRERELEASE_LABEL_RANK)

_PRERELEASE_SUFFIX_RE = re.compile(r"-(?:alpha|beta|rc|pre).*$")
_PRERELEASE_NUMBER_RE = re.compile(r"-(alpha|beta|rc|pre)\.(\d+)")


class BumpKind(StrEnum):
    """How a version must change between two releases."""

    SKIP = "skip"
    PRERELEASE = "prerelease"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"

    @classmethod
    def parse(cls, value: str) -> BumpKind:
        """Parse a bump kind name, ignoring case and surrounding whitespace.

        Raises:
            InvalidBumpKindError: If the name is not a known bump kind
        """
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            valid = ", ".join(kind.value for kind in cls)
            raise InvalidBumpKindError(
                f"Unknown bump kind {value!r}. Expected one of: {valid}"
            ) from e


_BUMP_PRIORITY: dict[BumpKind, int] = {
    BumpKind.SKIP: 0,
    BumpKind.PRERELEASE: 1,
    BumpKind.PATCH: 2,
    BumpKind.MINOR: 3,
    BumpKind.MAJOR: 4,
}


def bump_priority(kind: BumpKind) -> int:
    """Return the strength of a bump kind (higher wins)."""
    return _BUMP_PRIORITY[kind]


def strongest_bump(kinds: Iterable[BumpKind]) -> BumpKind | None:
    """Return the highest-priority bump kind, or None for an empty iterable."""
    return max(kinds, key=bump_priority, default=None)


@dataclass(frozen=True)
class ParsedVersion:
    """A version split into its numeric and prerelease parts.

    ``prerelease_number`` only carries meaning while ``is_prerelease`` is set.
    """

    major: int
    minor: int
    patch: int
    is_prerelease: bool = False
    prerelease_label: str = DEFAULT_PRERELEASE_LABEL
    prerelease_number: int = 0

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.is_prerelease:
            return f"{core}-{self.prerelease_label}.{self.prerelease_number}"
        return core

    def sort_key(self) -> tuple[int, int, int, int, int]:
        """Key ordering versions semantically, prereleases before their release."""
        if not self.is_prerelease:
            return (self.major, self.minor, self.patch, _STABLE_RANK, 0)
        rank = PRERELEASE_LABEL_RANK.get(self.prerelease_label, _STABLE_RANK - 1)
        return (self.major, self.minor, self.patch, rank, self.prerelease_number)

    def to_dict(self) -> dict[str, Any]:
        return {
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "is_prerelease": self.is_prerelease,
            "prerelease_label": self.prerelease_label,
            "prerelease_number": self.prerelease_number,
            "string": str(self),
        }


def _to_int(parts: list[str], index: int) -> int:
    if index < len(parts) and parts[index].isascii() and parts[index].isdigit():
        return int(parts[index])
    return 0


def parse_version(tag: str) -> ParsedVersion:
    """Parse a tag such as ``v1.2.3-rc.2`` into a ParsedVersion.

    A leading ``v`` is optional. Any ``-`` marks the version as a
    prerelease; the label and counter are recovered from a
    ``-{alpha|beta|rc|pre}.{n}`` suffix when present, otherwise they
    default to ``pre`` and 0. Numeric fields that are missing or not
    plain digits default to 0.

    Args:
        tag: Tag or version string

    Returns:
        Parsed version (never raises)
    """
    version = tag.lstrip("v")
    is_prerelease = "-" in version
    parts = _PRERELEASE_SUFFIX_RE.sub("", version).split(".")

    label = DEFAULT_PRERELEASE_LABEL
    number = 0
    if is_prerelease:
        match = _PRERELEASE_NUMBER_RE.search(version)
        if match:
            label = match.group(1)
            number = int(match.group(2))

    return ParsedVersion(
        major=_to_int(parts, 0),
        minor=_to_int(parts, 1),
        patch=_to_int(parts, 2),
        is_prerelease=is_prerelease,
        prerelease_label=label,
        prerelease_number=number,
    )


def bump_version(previous: ParsedVersion, kind: BumpKind) -> ParsedVersion:
    """Apply a bump to a parsed version.

    Args:
        previous: Version of the last tag
        kind: Bump to apply

    Returns:
        The next version. Skip returns ``previous`` unchanged.
    """
    if kind is BumpKind.SKIP:
        return previous

    if kind is BumpKind.MAJOR:
        return replace(
            previous,
            major=previous.major + 1,
            minor=0,
            patch=0,
            is_prerelease=False,
            prerelease_number=0,
        )

    if kind is BumpKind.MINOR:
        return replace(
            previous,
            minor=previous.minor + 1,
            patch=0,
            is_prerelease=False,
            prerelease_number=0,
        )

    if kind is BumpKind.PATCH:
        # Finishing a prerelease cycle ships its patch number as-is.
        patch = previous.patch if previous.is_prerelease else previous.patch + 1
        return replace(
            previous,
            patch=patch,
            is_prerelease=False,
            prerelease_number=0,
        )

    if previous.is_prerelease:
        return replace(previous, prerelease_number=previous.prerelease_number + 1)
    return replace(
        previous,
        patch=previous.patch + 1,
        is_prerelease=True,
        prerelease_number=1,
    )


def sort_tags(tags: Iterable[str]) -> list[str]:
    """Sort tags newest first using version-aware ordering.

    Prerelease tags rank ``-alpha < -beta < -rc < -pre`` and all of them
    sort below the release with the same numbers. Ties keep input order.
    """
    return sorted(tags, key=lambda tag: parse_version(tag).sort_key(), reverse=True)
