"""Release orchestration.

A release run has two phases:

1. :func:`plan_release` resolves the previous release tag, fetches and
   classifies the commits since then, computes the bump and next version,
   and renders the changelog. It only reads from the hosting platform.
2. :func:`publish_release` creates (or moves) the tag ref and creates the
   release record.

Planning errors abort the run before anything is published.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol

from release_tagger.core.changelog import render_changelog
from release_tagger.core.commits import (
    calculate_bump,
    classify_commits,
    filter_skip_release_commits,
)
from release_tagger.core.policy import ReleasePolicy
from release_tagger.core.tags import find_release_tags, parse_git_tag
from release_tagger.core.version import next_version, parse_version
from release_tagger.logging import get_logger

if TYPE_CHECKING:
    from semver import Version

    from release_tagger.config.models import ReleaseTaggerConfig
    from release_tagger.core.commits import ClassifiedCommit
    from release_tagger.core.version import BumpType
    from release_tagger.logging import Logger
    from release_tagger.vcs.github import Release
    from release_tagger.vcs.models import Commit, PullRequestRef, Tag

logger = get_logger(__name__)


class Forge(Protocol):
    """Hosting platform operations used by a release run."""

    def list_tags(self) -> list[Tag]: ...

    def ref_exists(self, ref: str) -> bool: ...

    def compare_commits(self, base: str, head: str) -> list[Commit]: ...

    def list_commits(self, head: str) -> list[Commit]: ...

    def list_pull_requests_for_commit(self, sha: str) -> list[PullRequestRef]: ...

    def create_or_update_tag(self, tag: str, sha: str) -> None: ...

    def delete_release_by_tag(self, tag: str) -> bool: ...

    def create_release(
        self,
        tag: str,
        *,
        name: str | None = None,
        body: str = "",
        prerelease: bool = False,
        target_commitish: str | None = None,
    ) -> Release: ...


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """Everything needed to publish a release.

    Attributes:
        policy: Lineage of the release
        head_sha: Commit the release points at
        previous_tag: Previous release tag, None for a first release
        baseline: Ref the commit range starts from, None for full history
        commits: Classified commits since the baseline, newest first, merges excluded
        bump: Bump decision
        version: Next version
        tag_name: Tag the release is published under
        rolling: Whether ``tag_name`` is a fixed tag moved on every run
        tag_pushed: Whether ``tag_name`` was pushed already and is released as is
    """

    policy: ReleasePolicy
    head_sha: str
    previous_tag: Tag | None
    baseline: str | None
    commits: tuple[ClassifiedCommit, ...]
    bump: BumpType
    version: str
    tag_name: str
    changelog: str
    rolling: bool = False
    tag_pushed: bool = False

    @property
    def is_first_release(self) -> bool:
        return self.previous_tag is None

    @property
    def is_prerelease(self) -> bool:
        return self.policy is ReleasePolicy.PRERELEASE


def _fetch_commits(forge: Forge, baseline: str | None, head_sha: str, log: Logger) -> list[Commit]:
    """Fetch the commits since ``baseline``, newest first."""
    if baseline and forge.ref_exists(f"tags/{baseline}"):
        commits = forge.compare_commits(baseline, head_sha)
        commits.reverse()
        return commits

    log.info("baseline_missing_using_full_history", baseline=baseline, head=head_sha)
    return forge.list_commits(head_sha)


def _attach_pull_requests(forge: Forge, commits: list[Commit]) -> list[Commit]:
    return [
        replace(commit, pull_requests=tuple(forge.list_pull_requests_for_commit(commit.sha)))
        for commit in commits
    ]


def plan_release(
    forge: Forge,
    config: ReleaseTaggerConfig,
    head_sha: str,
    *,
    release_tag: str | None = None,
    ref: str | None = None,
    log: Logger | None = None,
) -> ReleasePlan:
    """Plan the next release without publishing anything.

    Args:
        forge: Hosting platform client
        config: Release configuration (its environment selects the policy)
        head_sha: Commit to release
        release_tag: Fixed tag to publish under; it also becomes the start
            of the commit range instead of the previous release tag
        ref: Git ref of the triggering event; when it names a tag and no
            ``release_tag`` is given, that tag is released as its own version
            and the range starts at the highest lower release tag
        log: Logger for progress and skipped commits

    Returns:
        The release plan

    Raises:
        VersionSeedError: If this is a first release and no seed is configured
        VersionError: If the pushed tag is not a semantic version
        GitHubError: If the hosting platform cannot be queried
    """
    log = log or logger
    policy = config.policy
    log.info("release_planning", policy=policy.value, head=head_sha)

    pushed_tag = "" if release_tag else parse_git_tag(ref or "")
    pushed_version = parse_version(pushed_tag) if pushed_tag else None

    release_tags = find_release_tags(forge.list_tags(), policy, config.tag_rules)
    if pushed_version is not None:
        release_tags = [tv for tv in release_tags if tv.version < pushed_version]
    previous_tag: Tag | None = release_tags[0].tag if release_tags else None
    previous_version: Version | None = release_tags[0].version if release_tags else None
    log.info("previous_tag_resolved", tag=previous_tag.name if previous_tag else None)

    baseline = release_tag or (previous_tag.name if previous_tag else None)
    raw_commits = _fetch_commits(forge, baseline, head_sha, log)
    raw_commits = filter_skip_release_commits(raw_commits, config.commits.skip_release_patterns)
    if config.changelog.include_pull_requests:
        raw_commits = _attach_pull_requests(forge, raw_commits)
    log.info("commits_fetched", count=len(raw_commits))

    commits = [cc for cc in classify_commits(raw_commits, log=log) if not cc.is_merge]
    bump = calculate_bump(commits, config.commits)

    if pushed_version is not None:
        version = str(pushed_version)
        tag_name = pushed_tag
    else:
        version = next_version(
            previous_version,
            bump,
            policy,
            channel=config.version.prerelease_channel,
            initial_version=config.version.initial_version,
        )
        tag_name = release_tag or f"{config.effective_tag_prefix}{version}"
    log.info("release_planned", bump=bump.value, version=version, tag=tag_name)

    return ReleasePlan(
        policy=policy,
        head_sha=head_sha,
        previous_tag=previous_tag,
        baseline=baseline,
        commits=tuple(commits),
        bump=bump,
        version=version,
        tag_name=tag_name,
        changelog=render_changelog(commits, config.changelog),
        rolling=release_tag is not None,
        tag_pushed=pushed_version is not None,
    )


def publish_release(
    forge: Forge,
    plan: ReleasePlan,
    *,
    title: str | None = None,
    log: Logger | None = None,
) -> Release:
    """Create the tag and the release record for a plan.

    A rolling tag is moved to the plan's commit and its previous release
    record is deleted before the new one is created. A pushed tag already
    exists and only gets its release record.
    """
    log = log or logger

    if not plan.tag_pushed:
        forge.create_or_update_tag(plan.tag_name, plan.head_sha)
    if plan.rolling:
        forge.delete_release_by_tag(plan.tag_name)

    release = forge.create_release(
        plan.tag_name,
        name=title or plan.version,
        body=plan.changelog,
        prerelease=plan.is_prerelease,
        target_commitish=plan.head_sha,
    )
    log.info("release_published", tag=plan.tag_name, release_id=release.id)
    return release
