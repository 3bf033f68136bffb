"""Implementation of the 'plan' and 'changelog' commands.

Both only read from GitHub: 'plan' prints the computed release, 'changelog'
prints just the rendered changelog so it can be piped into a file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from release_tagger.cli.commands._common import load_run_config, open_github_client
from release_tagger.cli.commands.release import print_plan
from release_tagger.exceptions import ReleaseTaggerError
from release_tagger.release import ReleasePlan, plan_release

if TYPE_CHECKING:
    from rich.console import Console


def _plan(
    path: str | None,
    environment: str | None,
    sha: str,
    repository: str | None,
    release_tag: str | None,
    ref: str | None,
    err_console: Console,
) -> ReleasePlan:
    try:
        config = load_run_config(path, environment)
        with open_github_client(config, repository) as client:
            return plan_release(client, config, sha, release_tag=release_tag, ref=ref)
    except ReleaseTaggerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e


def run_plan(
    path: str | None,
    environment: str | None,
    sha: str,
    repository: str | None,
    release_tag: str | None,
    ref: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the plan command."""
    plan = _plan(path, environment, sha, repository, release_tag, ref, err_console)

    print_plan(plan, console)
    if plan.changelog:
        console.print()
        console.print(plan.changelog, markup=False)


def run_changelog(
    path: str | None,
    environment: str | None,
    sha: str,
    repository: str | None,
    release_tag: str | None,
    ref: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the changelog command."""
    plan = _plan(path, environment, sha, repository, release_tag, ref, err_console)
    console.print(plan.changelog, markup=False, highlight=False, soft_wrap=True)
