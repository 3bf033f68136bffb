"""Changelog rendering from classified commits.

Commits are bucketed by type into sections::

    ## Bug Fixes
    * fix(api): handle null response ([a1b2c3d](https://github.com/o/r/commit/a1b2c3d...))

    ## Features
    * feat: add login ([e4f5a6b](https://github.com/o/r/commit/e4f5a6b...))
      Body lines are indented by two spaces.

Sections are ordered by title unless the priority order is configured.
Commits keep their input order within a section; the renderer never
re-sorts them, so the output for a given input is always byte-identical.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from release_tagger.core.commits import CommitType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_tagger.config.models import ChangelogConfig
    from release_tagger.core.commits import ClassifiedCommit

SectionOrder = Literal["title", "priority"]

SECTION_TITLES: dict[CommitType, str] = {
    CommitType.FEAT: "Features",
    CommitType.FIX: "Bug Fixes",
    CommitType.DOCS: "Documentation",
    CommitType.STYLE: "Styles",
    CommitType.REFACTOR: "Code Refactoring",
    CommitType.PERF: "Performance Improvements",
    CommitType.TEST: "Tests",
    CommitType.BUILD: "Builds",
    CommitType.CI: "Continuous Integration",
    CommitType.CHORE: "Chores",
    CommitType.REVERT: "Reverts",
}

INDENT = "  "


@dataclass(frozen=True, slots=True)
class ChangelogSection:
    """A titled group of rendered changelog entries."""

    title: str
    lines: tuple[str, ...]

    def render(self) -> str:
        return "\n".join([f"## {self.title}", *self.lines])


def format_commit_entry(
    cc: ClassifiedCommit,
    *,
    include_body: bool = True,
    include_pull_requests: bool = False,
) -> str:
    """Format one commit as a changelog entry.

    Args:
        cc: Classified commit
        include_body: Append body and footer lines, indented
        include_pull_requests: Append links to associated pull requests

    Returns:
        Entry text, possibly spanning several lines
    """
    entry = f"* {cc.header} ([{cc.short_sha}]({cc.url}))"

    if include_pull_requests and cc.pull_requests:
        links = ", ".join(f"[#{pr.number}]({pr.url})" for pr in cc.pull_requests)
        entry = f"{entry} {links}"

    if not include_body:
        return entry

    lines = [entry]
    for block in (cc.body, cc.footer):
        if not block:
            continue
        lines.extend(f"{INDENT}{line}" if line else "" for line in block.splitlines())
    return "\n".join(lines)


def group_commits_by_section(
    commits: Iterable[ClassifiedCommit],
    *,
    order: SectionOrder = "title",
    include_body: bool = True,
    include_pull_requests: bool = False,
) -> list[ChangelogSection]:
    """Group commits into changelog sections.

    Merge commits are dropped. Empty sections are omitted.

    Args:
        commits: Classified commits in input order
        order: ``"title"`` sorts sections by title, ``"priority"`` follows
            the declaration order of :class:`CommitType`
        include_body: Include body and footer lines
        include_pull_requests: Include pull request links

    Returns:
        Non-empty sections in output order
    """
    buckets: dict[CommitType, list[str]] = {}
    for cc in commits:
        if cc.is_merge:
            continue
        buckets.setdefault(cc.commit_type, []).append(
            format_commit_entry(
                cc,
                include_body=include_body,
                include_pull_requests=include_pull_requests,
            )
        )

    if order == "priority":
        types = [t for t in CommitType if t in buckets]
    else:
        types = sorted(buckets, key=lambda t: SECTION_TITLES[t])

    return [ChangelogSection(title=SECTION_TITLES[t], lines=tuple(buckets[t])) for t in types]


def render_changelog(
    commits: Iterable[ClassifiedCommit],
    config: ChangelogConfig | None = None,
) -> str:
    """Render classified commits as changelog text.

    Args:
        commits: Classified commits; merges are skipped, reverts are listed
        config: Changelog configuration (defaults apply when omitted)

    Returns:
        Changelog text, or an empty string when there is nothing to list
    """
    if config is None:
        sections = group_commits_by_section(commits)
    else:
        sections = group_commits_by_section(
            commits,
            order=config.section_order,
            include_body=config.include_body,
            include_pull_requests=config.include_pull_requests,
        )

    return "\n\n".join(section.render() for section in sections)
