"""Pydantic models for the ``[tool.release-tagger]`` configuration table."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from release_tagger.core.policy import Environment, ReleasePolicy, policy_for_environment
from release_tagger.core.tags import DEFAULT_PRERELEASE_MARKER, TagRules
from release_tagger.core.version import DEFAULT_PRERELEASE_CHANNEL, parse_version
from release_tagger.exceptions import VersionError


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class TagsConfig(_Section):
    """Which tags count as releases of each lineage."""

    prerelease_marker: str = DEFAULT_PRERELEASE_MARKER
    stable_allows_prerelease: bool = True

    def rules(self, channel: str = DEFAULT_PRERELEASE_CHANNEL) -> TagRules:
        return TagRules(
            prerelease_marker=self.prerelease_marker,
            channel=channel,
            stable_allows_prerelease=self.stable_allows_prerelease,
        )


class CommitsConfig(_Section):
    """Commit classification and bump settings."""

    reverts_affect_bump: bool = False
    skip_release_patterns: list[str] = Field(
        default_factory=lambda: ["[skip release]", "[release skip]", "[no release]"]
    )


class VersionConfig(_Section):
    """Version numbering settings."""

    initial_version: str | None = "0.1.0"
    prerelease_channel: str = DEFAULT_PRERELEASE_CHANNEL
    tag_prefix: str = "v"

    @field_validator("initial_version")
    @classmethod
    def _check_initial_version(cls, value: str | None) -> str | None:
        if not value:
            return None
        try:
            parse_version(value)
        except VersionError as e:
            raise ValueError(str(e)) from e
        return value

    @field_validator("prerelease_channel")
    @classmethod
    def _check_channel(cls, value: str) -> str:
        if not value or not value.isalnum():
            raise ValueError("prerelease_channel must be a non-empty alphanumeric identifier")
        return value


class ChangelogConfig(_Section):
    """Changelog rendering settings."""

    section_order: Literal["title", "priority"] = "title"
    include_body: bool = True
    include_pull_requests: bool = False


class GitHubConfig(_Section):
    """GitHub repository and API settings."""

    owner: str | None = None
    repo: str | None = None
    api_url: str = "https://api.github.com"
    token_env: str = "GITHUB_TOKEN"
    release_title: str | None = None


class ReleaseTaggerConfig(_Section):
    """Complete release-tagger configuration."""

    environment: Environment = Environment.PROD
    tags: TagsConfig = Field(default_factory=TagsConfig)
    commits: CommitsConfig = Field(default_factory=CommitsConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    changelog: ChangelogConfig = Field(default_factory=ChangelogConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @property
    def policy(self) -> ReleasePolicy:
        return policy_for_environment(self.environment)

    @property
    def tag_rules(self) -> TagRules:
        """Lineage rules; the pre-release channel also marks pre-release tags."""
        return self.tags.rules(channel=self.version.prerelease_channel)

    @property
    def effective_tag_prefix(self) -> str:
        return self.version.tag_prefix
