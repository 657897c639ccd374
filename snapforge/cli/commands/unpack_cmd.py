"""``snapforge unpack ARCHIVE ROOT`` — write a zip archive's entries into a directory store."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from snapforge.cli.common import fail, open_store
from snapforge.core.errors import SnapforgeError
from snapforge.core.repository import Repository

console = Console()


def unpack_cmd(
    archive: Path = typer.Argument(..., help="Source zip archive."),
    root: Path = typer.Argument(..., help="Target store directory (created if missing)."),
    prune: bool = typer.Option(
        False,
        "--prune/--no-prune",
        help="Delete recognised files the archive does not have.",
    ),
) -> None:
    """Unpack a zip archive into a directory store."""
    source = open_store(archive, archive=True, console=console)
    target = open_store(root, archive=False, console=console, must_exist=False)
    try:
        repository = Repository.from_store(source)
        report = repository.write_to(target, prune=prune)
    except SnapforgeError as exc:
        raise fail(console, "Unpack", exc) from exc

    console.print(
        Panel(
            "\n".join([
                "[bold green]Unpacked![/bold green]",
                "",
                f"[bold]Artifacts:[/bold] {len(repository.last())}",
                f"[bold]Written:[/bold]   {len(report.written)}",
                f"[bold]Deleted:[/bold]   {len(report.deleted)}",
            ]),
            title=f"[bold]{root}[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
