"""Shared fixtures for release-tagger tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from release_tagger.vcs.models import Commit, Tag

if TYPE_CHECKING:
    from pathlib import Path

REPO_URL = "https://github.com/octo/widgets/commit"


def make_commit(sha: str, message: str) -> Commit:
    """Build a commit with a web URL derived from its SHA."""
    return Commit(sha=sha, message=message, url=f"{REPO_URL}/{sha}")


class RecordingLogger:
    """Logger double that records (level, event, fields) tuples."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str | None, dict[str, object]]] = []

    def _record(self, level: str, event: str | None, **kw: object) -> None:
        self.records.append((level, event, kw))

    def debug(self, event: str | None = None, **kw: object) -> None:
        self._record("debug", event, **kw)

    def info(self, event: str | None = None, **kw: object) -> None:
        self._record("info", event, **kw)

    def warning(self, event: str | None = None, **kw: object) -> None:
        self._record("warning", event, **kw)

    def error(self, event: str | None = None, **kw: object) -> None:
        self._record("error", event, **kw)

    def events(self, level: str | None = None) -> list[str | None]:
        return [event for lvl, event, _ in self.records if level is None or lvl == level]


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """A logger that records every call."""
    return RecordingLogger()


@pytest.fixture
def feat_commit() -> Commit:
    """A feature commit."""
    return make_commit("feat1234567890", "feat: add user authentication")


@pytest.fixture
def fix_commit() -> Commit:
    """A scoped bug fix commit."""
    return make_commit("fix1234567890", "fix(core): resolve memory leak")


@pytest.fixture
def breaking_commit() -> Commit:
    """A fix commit declaring a breaking change in its footer."""
    return make_commit(
        "break123456789",
        "fix: drop legacy endpoint\n\nBREAKING CHANGE: old API removed",
    )


@pytest.fixture
def merge_commit() -> Commit:
    """A pull request merge commit."""
    return make_commit(
        "merge12345678",
        "Merge pull request #42 from octo/feature-x\n\nfeat!: huge change",
    )


@pytest.fixture
def revert_commit() -> Commit:
    """A revert commit created by git revert."""
    return make_commit(
        "revert1234567",
        'Revert "feat: add user authentication"\n\nThis reverts commit feat1234567890.',
    )


@pytest.fixture
def sample_commits(
    feat_commit: Commit,
    fix_commit: Commit,
    breaking_commit: Commit,
    merge_commit: Commit,
) -> list[Commit]:
    """A mixed range of commits, newest first."""
    return [
        feat_commit,
        fix_commit,
        make_commit("docs123456789", "docs: update README"),
        breaking_commit,
        merge_commit,
        make_commit("chore12345678", "chore(deps): bump httpx"),
    ]


@pytest.fixture
def sample_tags() -> list[Tag]:
    """Tags of both lineages plus non-release tags."""
    return [
        Tag("v1.0.0", "a" * 40),
        Tag("v1.2.0", "b" * 40),
        Tag("v1.1.0", "c" * 40),
        Tag("v1.3.0-pre.0", "d" * 40),
        Tag("v1.3.0-pre.1", "e" * 40),
        Tag("v1.2.1-rc.1", "f" * 40),
        Tag("latest", "0" * 40),
    ]


@pytest.fixture
def project_with_pyproject(tmp_path: Path) -> Path:
    """A project directory with a [tool.release-tagger] table."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.release-tagger]
environment = "test"

[tool.release-tagger.version]
prerelease_channel = "rc"

[tool.release-tagger.github]
owner = "octo"
repo = "widgets"
"""
    )
    return tmp_path
