"""Plain records exchanged with the hosting platform."""

from __future__ import annotations

from dataclasses import dataclass, field

SHORT_SHA_LENGTH = 7


@dataclass(frozen=True, slots=True)
class Tag:
    """A git tag and the commit it points at."""

    name: str
    commit_sha: str = ""


@dataclass(frozen=True, slots=True)
class PullRequestRef:
    """A pull request associated with a commit."""

    number: int
    url: str


@dataclass(frozen=True, slots=True)
class Commit:
    """A commit as returned by the hosting platform's compare API."""

    sha: str
    message: str
    url: str = ""
    pull_requests: tuple[PullRequestRef, ...] = field(default_factory=tuple)

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]
