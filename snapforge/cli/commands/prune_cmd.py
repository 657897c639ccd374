"""``snapforge prune [ROOT] --pattern GLOB`` — delete matching artifacts from a store.

Matching keys are removed from the store index and the medium is then
synchronised, which deletes the orphaned files. Files the key mapping does
not recognise are never touched.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from snapforge.cli.common import fail, open_store
from snapforge.config import settings
from snapforge.core.errors import SnapforgeError
from snapforge.core.filters import Filter

console = Console()


def prune_cmd(
    root: Path | None = typer.Argument(
        None,
        help="Store directory (or zip file with --archive). Defaults to the store_root setting.",
    ),
    pattern: str = typer.Option(
        ...,
        "--pattern",
        "-p",
        help="Glob over artifact paths to delete.",
    ),
    archive: bool = typer.Option(False, "--archive", help="Treat ROOT as a zip archive."),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Only list what would be deleted.",
    ),
) -> None:
    """Remove artifacts matching a pattern and synchronise the store."""
    if root is None:
        root = settings.store_root
    store = open_store(root, archive, console)
    doomed = store.keys(Filter(pattern=pattern))
    if not doomed:
        console.print(f"[dim]Nothing matches {pattern!r} in {root}.[/dim]")
        return

    if dry_run:
        for key in doomed:
            console.print(f"  [yellow]would delete[/yellow] {key}")
        return

    for key in doomed:
        store.remove(key)
    try:
        report = store.synchronise()
    except SnapforgeError as exc:
        raise fail(console, "Prune", exc) from exc

    for name in report.deleted:
        console.print(f"  [red]deleted[/red] {name}")
    console.print(f"[bold green]Pruned {len(report.deleted)} file(s).[/bold green]")
