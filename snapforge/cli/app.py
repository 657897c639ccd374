"""Main Typer application — imports and registers all CLI commands.

Entry point: ``snapforge`` (configured via pyproject.toml project.scripts).

Commands: ls, pack, unpack, prune.
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from snapforge.cli.commands.ls_cmd import ls_cmd
from snapforge.cli.commands.pack_cmd import pack_cmd
from snapforge.cli.commands.prune_cmd import prune_cmd
from snapforge.cli.commands.unpack_cmd import unpack_cmd
from snapforge.config import settings

app = typer.Typer(
    name="snapforge",
    help="Snapforge: typed, content-addressed build artifact stores.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="ls", help="List artifacts in a directory or archive store.")(ls_cmd)
app.command(name="pack", help="Pack a directory store into a zip archive.")(pack_cmd)
app.command(name="unpack", help="Unpack a zip archive into a directory store.")(unpack_cmd)
app.command(name="prune", help="Delete artifacts matching a pattern.")(prune_cmd)


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log at DEBUG level."
    ),
) -> None:
    """Configure logging before any command runs."""
    level = logging.DEBUG if verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    logging.getLogger("snapforge").setLevel(level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
