"""Command line interface for release-version."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from release_version import __version__

app = typer.Typer(
    name="release-version",
    help="Derive the next release version from Conventional Commits.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"release-version {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
) -> None:
    _setup_logging(verbose)


@app.command("next")
def next_command(
    path: Annotated[str | None, typer.Option(help="Project directory.")] = None,
    token: Annotated[
        str | None, typer.Option(envvar="GITHUB_TOKEN", help="GitHub token.", show_default=False)
    ] = None,
    repository: Annotated[str | None, typer.Option(help="Repository as owner/name.")] = None,
    event_path: Annotated[
        str | None, typer.Option("--event-path", help="GitHub Actions event payload.")
    ] = None,
    pull_request: Annotated[
        int | None, typer.Option("--pr", help="Pull request number to fetch.")
    ] = None,
    build_metadata: Annotated[
        str | None, typer.Option("--build-metadata", help="Build metadata to append.")
    ] = None,
    output: Annotated[
        str | None, typer.Option(help="Output file (defaults to $GITHUB_OUTPUT).")
    ] = None,
    publish: Annotated[bool, typer.Option(help="Create the GitHub release.")] = False,
) -> None:
    """Compute the next version for a pull request."""
    from release_version.cli.commands.next_version import run_next

    run_next(
        path=path,
        token=token,
        repository=repository,
        event_path=event_path,
        pull_request=pull_request,
        build_metadata=build_metadata,
        output=output,
        publish=publish,
        console=console,
        err_console=err_console,
    )


@app.command("parse")
def parse_command(
    text: Annotated[str, typer.Argument(help="Version string.")],
    pep440: Annotated[bool, typer.Option("--pep440", help="Read a PEP 440 version.")] = False,
) -> None:
    """Show the renderings of a version."""
    from release_version.cli.commands.inspect import run_parse

    run_parse(text, pep440, console, err_console)


@app.command("classify")
def classify_command(
    title: Annotated[str, typer.Argument(help="Commit or pull request title.")],
    body: Annotated[str | None, typer.Option(help="Commit or pull request body.")] = None,
) -> None:
    """Show the impact of a Conventional Commits title."""
    from release_version.cli.commands.inspect import run_classify

    run_classify(title, body, console, err_console)


def main() -> None:
    app()
