"""Core business logic for release-tagger.

This module contains the fundamental building blocks:
- Release tag classification and previous-release resolution
- Conventional commit classification and bump calculation
- Semantic version incrementing (stable and pre-release channels)
- Changelog rendering
"""

from __future__ import annotations

from release_tagger.core.changelog import (
    SECTION_TITLES,
    ChangelogSection,
    format_commit_entry,
    group_commits_by_section,
    render_changelog,
)
from release_tagger.core.commits import (
    ClassifiedCommit,
    CommitType,
    calculate_bump,
    classify_commits,
    filter_skip_release_commits,
    get_breaking_changes,
)
from release_tagger.core.policy import (
    Environment,
    ReleasePolicy,
    parse_environment,
    parse_policy,
    policy_for_environment,
)
from release_tagger.core.tags import (
    TagRules,
    TagVersion,
    classify_tag,
    find_release_tags,
    parse_git_tag,
    resolve_previous_tag,
)
from release_tagger.core.version import BumpType, next_version, parse_version

__all__ = [
    "SECTION_TITLES",
    "BumpType",
    "ChangelogSection",
    "ClassifiedCommit",
    "CommitType",
    "Environment",
    "ReleasePolicy",
    "TagRules",
    "TagVersion",
    "calculate_bump",
    "classify_commits",
    "classify_tag",
    "filter_skip_release_commits",
    "find_release_tags",
    "format_commit_entry",
    "get_breaking_changes",
    "group_commits_by_section",
    "next_version",
    "parse_environment",
    "parse_git_tag",
    "parse_policy",
    "parse_version",
    "policy_for_environment",
    "render_changelog",
    "resolve_previous_tag",
]
