"""Hosting platform access for release-tagger."""

from __future__ import annotations

from release_tagger.vcs.github import GitHubClient, Release
from release_tagger.vcs.models import Commit, PullRequestRef, Tag

__all__ = [
    "Commit",
    "GitHubClient",
    "PullRequestRef",
    "Release",
    "Tag",
]
