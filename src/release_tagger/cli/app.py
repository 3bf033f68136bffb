"""Typer application for the release-tagger command line."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from release_tagger import __version__
from release_tagger.logging import configure_logging

app = typer.Typer(
    name="release-tagger",
    help="Compute the next version from conventional commits and publish a GitHub release.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

PathOption = Annotated[
    str | None, typer.Option("--path", "-p", help="Project directory containing pyproject.toml")
]
EnvOption = Annotated[
    str | None,
    typer.Option(
        "--env", "-e", envvar="RELEASE_ENVIRONMENT", help="Environment: dev, test or prod"
    ),
]
ShaOption = Annotated[
    str, typer.Option("--sha", envvar="GITHUB_SHA", help="Commit to release")
]
RepoOption = Annotated[
    str | None,
    typer.Option("--repo", envvar="GITHUB_REPOSITORY", help="Repository as owner/name"),
]
ReleaseTagOption = Annotated[
    str | None,
    typer.Option(
        "--release-tag",
        envvar="AUTOMATIC_RELEASE_TAG",
        help="Fixed tag to publish under (moved on every run)",
    ),
]
RefOption = Annotated[
    str | None,
    typer.Option(
        "--ref", envvar="GITHUB_REF", help="Triggering git ref; a pushed tag is released as is"
    ),
]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"release-tagger {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only show warnings")] = False,
    json_log: Annotated[bool, typer.Option("--json-log", help="Log as JSON lines")] = False,
) -> None:
    """release-tagger command line."""
    configure_logging(verbose=verbose, quiet=quiet, json_log=json_log)


@app.command()
def plan(
    sha: ShaOption,
    path: PathOption = None,
    env: EnvOption = None,
    repo: RepoOption = None,
    release_tag: ReleaseTagOption = None,
    ref: RefOption = None,
) -> None:
    """Show the previous tag, bump, next version and changelog."""
    from release_tagger.cli.commands.plan import run_plan

    run_plan(path, env, sha, repo, release_tag, ref, console, err_console)


@app.command()
def changelog(
    sha: ShaOption,
    path: PathOption = None,
    env: EnvOption = None,
    repo: RepoOption = None,
    release_tag: ReleaseTagOption = None,
    ref: RefOption = None,
) -> None:
    """Print the changelog for the commits since the previous release."""
    from release_tagger.cli.commands.plan import run_changelog

    run_changelog(path, env, sha, repo, release_tag, ref, console, err_console)


@app.command()
def release(
    sha: ShaOption,
    path: PathOption = None,
    env: EnvOption = None,
    repo: RepoOption = None,
    release_tag: ReleaseTagOption = None,
    ref: RefOption = None,
    title: Annotated[str | None, typer.Option("--title", help="Release title")] = None,
    execute: Annotated[
        bool, typer.Option("--execute", help="Publish the tag and release (default: dry run)")
    ] = False,
) -> None:
    """Tag the commit and create a GitHub release."""
    from release_tagger.cli.commands.release import run_release

    run_release(path, execute, env, sha, repo, release_tag, ref, title, console, err_console)
