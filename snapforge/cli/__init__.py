"""Snapforge CLI: Typer-based command-line interface.

Provides the ``snapforge`` command with subcommands for listing, packing,
unpacking and pruning directory and archive stores.

All output uses Rich for formatted terminal display.
"""
