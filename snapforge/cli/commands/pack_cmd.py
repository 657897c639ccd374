"""``snapforge pack ROOT ARCHIVE`` — write a directory store into a zip archive.

The directory is loaded into a repository snapshot, which is then written to
the archive store and synchronised. By default keys the directory no longer
has are pruned from the archive so it mirrors the directory exactly.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from snapforge.cli.common import fail, open_store
from snapforge.core.errors import SnapforgeError
from snapforge.core.repository import Repository

console = Console()


def pack_cmd(
    root: Path = typer.Argument(..., help="Source store directory."),
    archive: Path = typer.Argument(..., help="Target zip archive (created if missing)."),
    prune: bool = typer.Option(
        True,
        "--prune/--no-prune",
        help="Remove archive entries the directory does not have.",
    ),
) -> None:
    """Pack a directory store into a zip archive."""
    source = open_store(root, archive=False, console=console)
    target = open_store(archive, archive=True, console=console, must_exist=False)
    try:
        repository = Repository.from_store(source)
        report = repository.write_to(target, prune=prune)
    except SnapforgeError as exc:
        raise fail(console, "Pack", exc) from exc

    snapshot = repository.last()
    console.print(
        Panel(
            "\n".join([
                "[bold green]Packed![/bold green]",
                "",
                f"[bold]Artifacts:[/bold] {len(snapshot)}",
                f"[bold]Written:[/bold]   {len(report.written)}",
                f"[bold]Deleted:[/bold]   {len(report.deleted)}",
                f"[bold]Digest:[/bold]    {snapshot.digest()}",
            ]),
            title=f"[bold]{archive}[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
