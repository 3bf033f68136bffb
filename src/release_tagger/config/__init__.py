"""Configuration management for release-tagger."""

from __future__ import annotations

from release_tagger.config.loader import load_config
from release_tagger.config.models import (
    ChangelogConfig,
    CommitsConfig,
    GitHubConfig,
    ReleaseTaggerConfig,
    TagsConfig,
    VersionConfig,
)

__all__ = [
    "ChangelogConfig",
    "CommitsConfig",
    "GitHubConfig",
    "ReleaseTaggerConfig",
    "TagsConfig",
    "VersionConfig",
    "load_config",
]
