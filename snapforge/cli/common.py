"""Helpers shared by the CLI commands: store construction and error exits."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from snapforge.core.content import default_registry
from snapforge.core.mapping import SuffixKeyMapping
from snapforge.core.store import ArchiveStore, DirectoryStore, MediumStore


def default_mapping() -> SuffixKeyMapping:
    return SuffixKeyMapping(default_registry())


def open_store(location: Path, archive: bool, console: Console, must_exist: bool = True) -> MediumStore:
    """Open a directory or zip store, exiting with code 1 if it is missing."""
    if must_exist:
        exists = location.is_file() if archive else location.is_dir()
        if not exists:
            kind = "Archive" if archive else "Directory"
            console.print(f"[bold red]{kind} not found:[/bold red] {location}")
            raise typer.Exit(code=1)
    mapping = default_mapping()
    if archive:
        return ArchiveStore(mapping, location)
    return DirectoryStore(mapping, location)


def fail(console: Console, action: str, exc: Exception) -> typer.Exit:
    console.print(f"[bold red]{action} failed:[/bold red] {exc}")
    return typer.Exit(code=1)
