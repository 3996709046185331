"""Implementation of the 'parse' and 'classify' commands.

Both commands work offline and are handy for checking how a version
string or a pull request title will be interpreted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table

from release_version.core.commits import resolve_impact
from release_version.core.pep440 import from_pep440
from release_version.core.version import Version

if TYPE_CHECKING:
    from rich.console import Console


def run_parse(text: str, pep440: bool, console: Console, err_console: Console) -> None:
    """Print the renderings of a version string.

    Args:
        text: Version string
        pep440: Read the input as a PEP 440 version
        console: Console for standard output
        err_console: Console for error output
    """
    version = from_pep440(text) if pep440 else Version.parse(text)
    if version is None:
        kind = "PEP 440" if pep440 else "semantic"
        err_console.print(f"[red]Invalid {kind} version:[/] {text}")
        raise SystemExit(1)

    table = Table(show_header=False, box=None)
    table.add_row("version", str(version))
    table.add_row("tag", version.as_tag())
    table.add_row("pep440", version.as_pep440())
    if version.prerelease:
        table.add_row("prerelease", version.prerelease)
    if version.buildmetadata:
        table.add_row("buildmetadata", version.buildmetadata)
    console.print(table)


def run_classify(title: str, body: str | None, console: Console, err_console: Console) -> None:
    """Print the impact of a title and optional body."""
    change = resolve_impact(title, body)
    if change is None:
        err_console.print(f"[red]Not a Conventional Commits title:[/] {title}")
        raise SystemExit(1)

    scope = f" ([cyan]{change.scope}[/])" if change.scope else ""
    console.print(f"[bold]{change.type}[/]{scope} -> [green]{change.impact}[/]")
