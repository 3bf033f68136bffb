"""Conventional commit classification and bump calculation.

Commit messages follow the Conventional Commits format::

    <type>[(scope)][!]: <subject>

    [body]

    [footer(s)]

Rules:
- ``BREAKING CHANGE:`` at the start of the body or a footer -> MAJOR
- ``!`` after type/scope -> MAJOR
- feat -> MINOR
- anything else -> PATCH (every run publishes a new version)

Merge commits (``Merge pull request #1 from ...``) never take part in the
bump or the changelog. Revert commits (``Revert "..."``) are listed in the
changelog but only affect the bump when ``reverts_affect_bump`` is set.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from release_tagger.core.version import BumpType
from release_tagger.exceptions import CommitParseError
from release_tagger.logging import get_logger
from release_tagger.vcs.models import SHORT_SHA_LENGTH

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from release_tagger.config.models import CommitsConfig
    from release_tagger.logging import Logger
    from release_tagger.vcs.models import Commit, PullRequestRef

logger = get_logger(__name__)


class CommitType(StrEnum):
    """Recognized conventional commit types, in changelog priority order."""

    FEAT = "feat"
    FIX = "fix"
    PERF = "perf"
    REVERT = "revert"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"


TYPE_NAMES = frozenset(t.value for t in CommitType)


# Conventional commit header: type(scope)!: subject
HEADER_PATTERN = re.compile(
    r"^(?P<type>\w+)(?:\((?P<scope>[^()\r\n]*)\))?(?P<breaking>!)?:\s+(?P<subject>\S.*)$"
)
MERGE_PATTERN = re.compile(r"^Merge pull request #(?P<number>\d+) from (?P<source>.+)$")
REVERT_PATTERN = re.compile(r'^Revert\s+"(?P<subject>.+)"\s*$')
BREAKING_PATTERN = re.compile(r"^\s*BREAKING[\s-]+CHANGES?:\s*")
FOOTER_TOKEN_PATTERN = re.compile(r"^(?:BREAKING[\s-]+CHANGES?:(?:\s|$)|[\w-]+(?::\s| #\S))")

_BUMP_RANK: dict[BumpType, int] = {
    BumpType.PATCH: 1,
    BumpType.MINOR: 2,
    BumpType.MAJOR: 3,
}

_TYPE_BUMPS: dict[CommitType, BumpType] = {
    CommitType.FEAT: BumpType.MINOR,
    CommitType.FIX: BumpType.PATCH,
    CommitType.PERF: BumpType.PATCH,
    CommitType.REVERT: BumpType.PATCH,
}


def _split_paragraphs(lines: list[str]) -> list[list[str]]:
    paragraphs: list[list[str]] = []
    current: list[str] = []
    for line in lines:
        if line.strip():
            current.append(line.rstrip())
        elif current:
            paragraphs.append(current)
            current = []
    if current:
        paragraphs.append(current)
    return paragraphs


def _split_body_footer(lines: list[str]) -> tuple[str | None, str | None]:
    """Split the lines after the header into body and footer.

    The footer starts at the first paragraph opening with a footer token
    (``BREAKING CHANGE: ...``, ``Refs: ...``, ``Closes #12``).
    """
    paragraphs = _split_paragraphs(lines)

    footer_start = len(paragraphs)
    for index, paragraph in enumerate(paragraphs):
        if FOOTER_TOKEN_PATTERN.match(paragraph[0].lstrip()):
            footer_start = index
            break

    def join(blocks: list[list[str]]) -> str | None:
        if not blocks:
            return None
        return "\n\n".join("\n".join(block) for block in blocks)

    return join(paragraphs[:footer_start]), join(paragraphs[footer_start:])


def _is_breaking_text(body: str | None, footer: str | None) -> bool:
    if body and BREAKING_PATTERN.match(body):
        return True
    if footer:
        return any(BREAKING_PATTERN.match(line) for line in footer.splitlines())
    return False


@dataclass(frozen=True, slots=True)
class ClassifiedCommit:
    """A commit classified by the conventional commit grammar.

    Attributes:
        commit_type: Type used for grouping; unrecognized types become chore
        raw_type: Type as written in the header, None for non-conventional headers
        scope: Optional scope in parentheses
        subject: Text after the colon (whole header when non-conventional)
        header: First line of the message
        body: Paragraphs between header and footer
        footer: Trailing token paragraphs
        is_breaking: Breaking change marker found
        is_merge: Pull request merge commit
        is_revert: Revert commit
        sha: Full commit SHA
        url: Web URL of the commit
        pull_requests: Associated pull requests
    """

    commit_type: CommitType
    raw_type: str | None
    scope: str | None
    subject: str
    header: str
    body: str | None = None
    footer: str | None = None
    is_breaking: bool = False
    is_merge: bool = False
    is_revert: bool = False
    sha: str = ""
    url: str = ""
    pull_requests: tuple[PullRequestRef, ...] = field(default_factory=tuple)

    @property
    def is_conventional(self) -> bool:
        """Whether the header declared a recognized type."""
        return self.raw_type in TYPE_NAMES

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]

    @classmethod
    def from_message(
        cls,
        message: str,
        *,
        sha: str = "",
        url: str = "",
        pull_requests: Sequence[PullRequestRef] = (),
    ) -> ClassifiedCommit:
        """Classify a raw commit message.

        Args:
            message: Full commit message, possibly multi-line
            sha: Commit SHA
            url: Commit web URL
            pull_requests: Pull requests associated with the commit

        Returns:
            Classified commit

        Raises:
            CommitParseError: If the message has no header line
        """
        lines = message.replace("\r\n", "\n").split("\n")
        while lines and not lines[0].strip():
            lines.pop(0)
        if not lines:
            raise CommitParseError("Commit message has no header", sha=sha)

        header = lines[0].strip()
        body, footer = _split_body_footer(lines[1:])
        is_breaking = _is_breaking_text(body, footer)

        commit_type = CommitType.CHORE
        raw_type: str | None = None
        scope: str | None = None
        subject = header
        is_merge = False
        is_revert = False

        if MERGE_PATTERN.match(header):
            is_merge = True
        elif revert := REVERT_PATTERN.match(header):
            commit_type = CommitType.REVERT
            raw_type = CommitType.REVERT.value
            subject = revert.group("subject")
            is_revert = True
        elif match := HEADER_PATTERN.match(header):
            raw_type = match.group("type").lower()
            scope = match.group("scope") or None
            subject = match.group("subject").strip()
            is_breaking = is_breaking or bool(match.group("breaking"))
            if raw_type in TYPE_NAMES:
                commit_type = CommitType(raw_type)
            is_revert = commit_type is CommitType.REVERT

        return cls(
            commit_type=commit_type,
            raw_type=raw_type,
            scope=scope,
            subject=subject,
            header=header,
            body=body,
            footer=footer,
            is_breaking=is_breaking,
            is_merge=is_merge,
            is_revert=is_revert,
            sha=sha,
            url=url,
            pull_requests=tuple(pull_requests),
        )

    @classmethod
    def from_commit(cls, commit: Commit) -> ClassifiedCommit:
        """Classify a commit record from the hosting platform."""
        return cls.from_message(
            commit.message,
            sha=commit.sha,
            url=commit.url,
            pull_requests=commit.pull_requests,
        )


def classify_commits(
    commits: Iterable[Commit],
    *,
    log: Logger | None = None,
) -> list[ClassifiedCommit]:
    """Classify commits, skipping those without a header.

    Unparseable and unrecognized commits are reported through ``log``;
    neither stops the run.

    Args:
        commits: Raw commits in the platform's native order
        log: Logger to report skipped commits to

    Returns:
        Classified commits in input order
    """
    log = log or logger
    classified: list[ClassifiedCommit] = []

    for commit in commits:
        try:
            cc = ClassifiedCommit.from_commit(commit)
        except CommitParseError as e:
            log.warning("commit_unparseable", sha=commit.sha, error=str(e))
            continue

        if not cc.is_merge and not cc.is_conventional:
            log.info(
                "commit_type_unrecognized",
                sha=cc.short_sha,
                type=cc.raw_type,
                header=cc.header,
            )
        classified.append(cc)

    return classified


def calculate_bump(
    commits: Iterable[ClassifiedCommit],
    config: CommitsConfig | None = None,
) -> BumpType:
    """Reduce classified commits to a single bump decision.

    Every commit is examined; the strongest bump wins regardless of order.
    Merge commits are ignored, as are reverts unless
    ``config.reverts_affect_bump`` is set. With nothing left the result is
    still PATCH.

    Args:
        commits: Classified commits
        config: Commit configuration

    Returns:
        MAJOR, MINOR or PATCH
    """
    reverts_count = config.reverts_affect_bump if config is not None else False
    bump = BumpType.PATCH

    for cc in commits:
        if cc.is_merge or (cc.is_revert and not reverts_count):
            continue

        if cc.is_breaking:
            candidate = BumpType.MAJOR
        else:
            candidate = _TYPE_BUMPS.get(cc.commit_type, BumpType.PATCH)

        if _BUMP_RANK[candidate] > _BUMP_RANK[bump]:
            bump = candidate

    return bump


def get_breaking_changes(commits: Iterable[ClassifiedCommit]) -> list[ClassifiedCommit]:
    """Return the breaking changes among ``commits``, merges excluded."""
    return [cc for cc in commits if cc.is_breaking and not cc.is_merge]


def filter_skip_release_commits(
    commits: Iterable[Commit],
    skip_patterns: Iterable[str],
) -> list[Commit]:
    """Drop commits whose message contains a skip-release marker.

    Markers such as ``[skip release]`` are matched case-insensitively
    anywhere in the message.
    """
    patterns = [p.lower() for p in skip_patterns if p]
    if not patterns:
        return list(commits)

    return [
        commit
        for commit in commits
        if not any(pattern in commit.message.lower() for pattern in patterns)
    ]
