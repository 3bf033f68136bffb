"""Exception hierarchy for release-tagger.

Every error raised by the package derives from :class:`ReleaseTaggerError`
so callers can surface a single failure message without catching
unrelated exceptions.
"""

from __future__ import annotations


class ReleaseTaggerError(Exception):
    """Base class for all release-tagger errors."""


# Configuration


class ConfigError(ReleaseTaggerError):
    """Configuration could not be loaded or is invalid."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml could be located."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid (e.g. an unknown environment)."""


class MissingCredentialsError(ConfigError):
    """A required credential is not set in the environment."""


# Commits


class CommitParseError(ReleaseTaggerError):
    """A commit message has no header that can be classified."""

    def __init__(self, message: str, *, sha: str = "") -> None:
        super().__init__(message)
        self.sha = sha


# Versions


class VersionError(ReleaseTaggerError):
    """A version string is invalid or cannot be incremented."""


class VersionSeedError(VersionError):
    """No previous release exists and no initial version was supplied."""


# Hosting platform


class GitHubError(ReleaseTaggerError):
    """A GitHub API call failed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
