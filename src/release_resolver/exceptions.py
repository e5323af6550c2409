"""Exception hierarchy for release-resolver.

The resolution engine itself never raises for business reasons: missing
tags, empty ranges and malformed versions all degrade to defaults. The
errors below cover the remaining cases (caller input, configuration and
cancellation).
"""

from __future__ import annotations


class ReleaseResolverError(Exception):
    """Base exception for all release-resolver errors."""


class ConfigError(ReleaseResolverError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml was found."""


class ConfigValidationError(ConfigError):
    """Configuration was found but is invalid."""


class InvalidBumpKindError(ReleaseResolverError, ValueError):
    """A bump kind name did not match any known kind."""


class ResolutionCancelledError(ReleaseResolverError):
    """The caller cancelled an in-flight version resolution.

    Args:
        step: Name of the collaborator call that was about to run
    """

    def __init__(self, step: str) -> None:
        self.step = step
        super().__init__(f"Version resolution cancelled before {step}")
