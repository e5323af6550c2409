"""Configuration models for release-resolver.

Configuration lives in ``[tool.release-resolver]`` in pyproject.toml.
Every field has a default, so an absent section yields the stock
behaviour.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from release_resolver.core.version import BumpKind

_SEMVER_CORE_RE = re.compile(r"^\d+\.\d+\.\d+$")


class VersionConfig(BaseModel):
    """Version numbering settings."""

    model_config = ConfigDict(extra="forbid")

    initial_version: str = Field(
        default="1.0.0",
        description="Version used to seed the fallback tag when no tags exist",
    )
    forced_bump: BumpKind | None = Field(
        default=None,
        description="Bump kind applied instead of classifying commits",
    )

    @field_validator("initial_version")
    @classmethod
    def _check_initial_version(cls, value: str) -> str:
        value = value.strip().lstrip("v")
        if not _SEMVER_CORE_RE.match(value):
            raise ValueError(f"initial_version must look like X.Y.Z, got {value!r}")
        return value

    @field_validator("forced_bump", mode="before")
    @classmethod
    def _normalize_forced_bump(cls, value: object) -> object:
        if isinstance(value, str):
            return BumpKind.parse(value)
        return value


class CommitsConfig(BaseModel):
    """Commit classification settings."""

    model_config = ConfigDict(extra="forbid")

    skip_ci_patterns: list[str] = Field(
        default_factory=lambda: [r"\[skip ci\]", r"\[ci skip\]"],
        description="Regexes; a range where every subject matches one is skipped",
    )
    bot_patterns: list[str] = Field(
        default_factory=lambda: ["[bot]", "github", "ProjectDirector", "SyncFileContents"],
        description="Substrings marking automation commits",
    )
    merge_patterns: list[str] = Field(
        default_factory=lambda: [
            "Merge pull request",
            "Merge branch 'main'",
            "Updated packages in",
            "Update.*package version",
        ],
        description="Regexes marking merge and dependency-update commits",
    )
    api_language: Literal["csharp", "python"] = Field(
        default="csharp",
        description="Which public API detector inspects the diff",
    )

    @field_validator("skip_ci_patterns", "merge_patterns")
    @classmethod
    def _check_regexes(cls, value: list[str]) -> list[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid regex {pattern!r}: {e}") from e
        return value


class ResolverConfig(BaseModel):
    """Top-level release-resolver configuration."""

    model_config = ConfigDict(extra="forbid")

    version: VersionConfig = Field(default_factory=VersionConfig)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    log_level: str = Field(default="INFO", description="structlog level name")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level {value!r}")
        return level
