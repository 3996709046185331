"""Implementation of the 'next' command.

The next command computes the version a pull request releases as and
publishes it as step outputs.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from release_version.config import ReleaseVersionConfig, load_config
from release_version.exceptions import ReleaseVersionError
from release_version.release import plan_release
from release_version.vcs import GitHubHistorySource, load_change_from_event

if TYPE_CHECKING:
    from rich.console import Console

    from release_version.release import ReleasePlan
    from release_version.vcs import ChangeRequest


def run_next(
    path: str | None,
    token: str | None,
    repository: str | None,
    event_path: str | None,
    pull_request: int | None,
    build_metadata: str | None,
    output: str | None,
    publish: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the next command.

    Args:
        path: Optional path to project directory
        token: GitHub token override
        repository: "owner/name" override
        event_path: GitHub Actions event payload override
        pull_request: Pull request number to fetch instead of reading the event
        build_metadata: Build metadata override
        output: File to append step outputs to (defaults to $GITHUB_OUTPUT)
        publish: Create the GitHub release when one should be made
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    # Load configuration
    try:
        config = load_config(project_path)
        data = config.model_dump()
        for key, value in (("token", token), ("repository", repository), ("event_path", event_path)):
            if value is not None:
                data["github"][key] = value
        if build_metadata is not None:
            data["version"]["build_metadata"] = build_metadata
        config = ReleaseVersionConfig.model_validate(data)
    except Exception as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    if not config.github.token:
        err_console.print("[red]Error:[/] No GitHub token available, cannot fetch releases.")
        raise SystemExit(1)

    try:
        plan = asyncio.run(_plan(config, pull_request, publish, console))
    except ReleaseVersionError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if plan.warning:
        err_console.print(f"[yellow]Warning:[/] {plan.warning}")

    console.print(
        Panel(
            f"Previous release: [cyan]{plan.previous}[/]\n"
            f"Impact: [cyan]{plan.impact.final_impact}[/]\n"
            f"Version: [green]{plan.version}[/]\n"
            f"Tag: [green]{plan.version.as_tag()}[/]\n"
            f"PEP 440: [green]{plan.version.as_pep440()}[/]\n"
            f"Release candidate: {'yes' if plan.is_prerelease else 'no'}\n"
            f"Should release: {'yes' if plan.should_release else 'no'}",
            title="[green]Next Version[/]",
            border_style="green",
        )
    )

    output_path = output or os.environ.get("GITHUB_OUTPUT")
    if output_path:
        write_outputs(Path(output_path), plan.outputs())
        console.print(f"  [green]✓[/] Wrote outputs to {output_path}")


async def _plan(
    config: ReleaseVersionConfig,
    pull_request: int | None,
    publish: bool,
    console: Console,
) -> ReleasePlan:
    async with GitHubHistorySource.from_config(config.github) as source:
        change = await _resolve_change(source, config, pull_request)
        plan = await plan_release(source, change, config)

        if publish and plan.should_release:
            await source.create_release(
                tag_name=plan.version.as_tag(),
                target_commitish=os.environ.get("GITHUB_SHA", "main"),
                name=plan.version.as_tag(),
                body=plan.release_notes,
                prerelease=plan.is_prerelease,
                make_latest=not plan.is_prerelease,
            )
            console.print(f"  [green]✓[/] Created release {plan.version.as_tag()}")
        elif publish:
            console.print("[yellow]Nothing to release; skipping publish.[/]")
    return plan


async def _resolve_change(
    source: GitHubHistorySource,
    config: ReleaseVersionConfig,
    pull_request: int | None,
) -> ChangeRequest:
    change = None
    if pull_request is not None:
        change = await source.get_change(pull_request)
    elif config.github.event_path:
        try:
            change = load_change_from_event(config.github.event_path)
        except (OSError, ValueError) as e:
            raise ReleaseVersionError(f"Could not read event payload: {e}") from e
    if change is None:
        raise ReleaseVersionError("Could not find pull request in context.")
    return change


def write_outputs(path: Path, outputs: dict[str, str]) -> None:
    """Append ``key=value`` lines to a GitHub Actions output file.

    Multi-line values use the heredoc delimiter syntax.
    """
    with path.open("a", encoding="utf-8") as f:
        for key, value in outputs.items():
            if "\n" in value:
                f.write(f"{key}<<__RELEASE_VERSION__\n{value}\n__RELEASE_VERSION__\n")
            else:
                f.write(f"{key}={value}\n")
