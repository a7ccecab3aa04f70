"""Shared infrastructure for min-pmt CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from typer.core import TyperGroup

from minpmt.config import load_config
from minpmt.errors import ConfigError, MinPmtError, ValidationError
from minpmt.storage import TicketStore

from ._json_state import echo_error

if TYPE_CHECKING:
    import click

    from minpmt.config import ProjectConfig

ROOT_HELP = "Project root directory (holds min-pmt.toml)"


class SortedGroup(TyperGroup):
    """Typer group that lists commands in alphabetical order."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return commands sorted alphabetically."""
        return sorted(super().list_commands(ctx))


def get_config(root: str = ".") -> ProjectConfig:
    """Load the project config, exiting with an error if it is invalid."""
    try:
        return load_config(Path(root))
    except ConfigError as e:
        echo_error(str(e))
        raise typer.Exit(1) from e


def get_store(root: str = ".") -> TicketStore:
    """Get a ticket store for the project at ``root``.

    Args:
        root: Project root directory.

    Returns:
        TicketStore instance configured from the root's config file
    """
    return TicketStore(get_config(root), root=Path(root))


def fail(error: MinPmtError) -> typer.Exit:
    """Report a core error and return the exit to raise."""
    if isinstance(error, ValidationError):
        echo_error("Invalid input", error.issues)
    else:
        echo_error(str(error))
    return typer.Exit(1)
