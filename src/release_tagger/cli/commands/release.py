"""Implementation of the 'release' command.

The release command plans the next release and, with --execute, publishes
the tag and the release record on GitHub.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.panel import Panel

from release_tagger.cli.commands._common import load_run_config, open_github_client
from release_tagger.core.commits import get_breaking_changes
from release_tagger.exceptions import ReleaseTaggerError
from release_tagger.release import plan_release, publish_release

if TYPE_CHECKING:
    from rich.console import Console

    from release_tagger.release import ReleasePlan


def print_plan(plan: ReleasePlan, console: Console) -> None:
    """Print a summary of a release plan."""
    lineage = "pre-release" if plan.is_prerelease else "release"
    console.print(f"Running in [cyan]{lineage}[/] mode")

    if plan.is_first_release:
        console.print("🎉 First release! No previous release tag found.")
    else:
        console.print(f"Previous release tag: [cyan]{plan.previous_tag.name}[/]")

    console.print(f"Found [cyan]{len(plan.commits)}[/] commits since last release")
    console.print(
        f"Bump: [cyan]{plan.bump}[/]  Next version: [green]{plan.version}[/]  "
        f"Tag: [green]{plan.tag_name}[/]"
    )

    breaking = get_breaking_changes(plan.commits)
    if breaking:
        console.print(f"[red]Breaking changes ({len(breaking)}):[/]")
        for cc in breaking:
            console.print(f"  • {cc.header} ({cc.short_sha})", markup=False)


def run_release(
    path: str | None,
    execute: bool,
    environment: str | None,
    sha: str,
    repository: str | None,
    release_tag: str | None,
    ref: str | None,
    title: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Optional path to project directory
        execute: Whether to actually publish
        environment: Environment override (dev, test, prod)
        sha: Commit to release
        repository: Repository as owner/name
        release_tag: Fixed tag to publish under instead of the version tag
        ref: Triggering git ref; a tag ref is released under that tag
        title: Release title (defaults to the configured title, then the version)
        console: Console for standard output
        err_console: Console for error output
    """
    try:
        config = load_run_config(path, environment)
        client = open_github_client(config, repository)
    except ReleaseTaggerError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    with client:
        try:
            plan = plan_release(client, config, sha, release_tag=release_tag, ref=ref)
        except ReleaseTaggerError as e:
            err_console.print(f"[red]Error computing release:[/] {e}")
            raise SystemExit(1) from e

        release_title = title or config.github.release_title or plan.version
        mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
        console.print(f"\n{mode_str} - Releasing [green]{plan.version}[/]\n")
        print_plan(plan, console)

        if not execute:
            if plan.tag_pushed:
                tag_line = f"  • Use pushed tag [cyan]{plan.tag_name}[/]\n"
            else:
                action = "Move" if plan.rolling else "Create"
                tag_line = (
                    f"  • {action} tag [cyan]{plan.tag_name}[/] at [cyan]{plan.head_sha[:7]}[/]\n"
                )
            console.print(
                Panel(
                    "[bold]Would make the following changes:[/]\n\n"
                    f"{tag_line}"
                    f"  • Create GitHub release [cyan]{release_title}[/]",
                    title="[yellow]Dry Run Preview[/]",
                    border_style="yellow",
                )
            )
            if plan.changelog:
                console.print(plan.changelog, markup=False)
            console.print("\n[dim]Run with [cyan]--execute[/] to apply these changes.[/]")
            return

        try:
            release = publish_release(client, plan, title=release_title)
        except ReleaseTaggerError as e:
            err_console.print(f"[red]Error publishing release:[/] {e}")
            raise SystemExit(1) from e

    console.print(
        Panel(
            f"[green]Successfully released {plan.version}![/]\n\n"
            f"Tag: [cyan]{plan.tag_name}[/]\n"
            f"Release: [cyan]{release.html_url}[/]",
            title="[green]Release Complete[/]",
            border_style="green",
        )
    )
