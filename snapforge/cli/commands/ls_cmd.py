"""``snapforge ls [ROOT]`` — list the keys of a directory or archive store.

Each row shows the artifact path, its content type suffix and the content
address of its encoded value. Listing decodes every matching entry.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from snapforge.cli.common import fail, open_store
from snapforge.config import settings
from snapforge.core.errors import SnapforgeError
from snapforge.core.filters import Filter
from snapforge.core.hasher import content_address

console = Console()


def ls_cmd(
    root: Path | None = typer.Argument(
        None,
        help="Store directory (or zip file with --archive). Defaults to the store_root setting.",
    ),
    pattern: str = typer.Option(
        "**",
        "--pattern",
        "-p",
        help="Glob over artifact paths; ** spans directories.",
    ),
    archive: bool = typer.Option(
        False,
        "--archive",
        help="Treat ROOT as a zip archive.",
    ),
) -> None:
    """List artifacts in a store with their content addresses."""
    if root is None:
        root = settings.store_root
    store = open_store(root, archive, console)
    try:
        rows = [
            (str(key.path), key.suffix, content_address(key.content_type, value))
            for key, value in store.items(Filter(pattern=pattern))
        ]
    except SnapforgeError as exc:
        raise fail(console, "Listing", exc) from exc

    if not rows:
        console.print(f"[dim]No artifacts match {pattern!r} in {root}.[/dim]")
        return

    table = Table(title=f"{root} ({len(rows)} artifact(s))")
    table.add_column("Path", style="cyan", no_wrap=True)
    table.add_column("Type", style="green")
    table.add_column("Address", style="dim", no_wrap=True)
    for path, suffix, address in sorted(rows):
        table.add_row(path, suffix, address[:19])
    console.print(table)
