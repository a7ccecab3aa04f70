"""Initialization command for min-pmt CLI."""

from __future__ import annotations

from pathlib import Path

import typer

from minpmt.config import get_config_path, init_config
from minpmt.errors import MinPmtError
from minpmt.storage import TicketStore

from ._helpers import ROOT_HELP, fail
from ._json_state import echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register init command."""

    @app.command()
    def init(
        folder: str | None = typer.Option(
            None,
            "--folder",
            "-f",
            help="Ticket folder name (default: pmt, or the existing config's folder)",
        ),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Initialize min-pmt in the current project.

        Writes min-pmt.toml (keeping an existing one) and creates the
        ticket folder.
        """
        try:
            config = init_config(Path(root), folder)
            TicketStore(config, root=Path(root)).ensure_ready()
        except MinPmtError as e:
            raise fail(e) from e
        except OSError as e:
            raise fail(MinPmtError(f"Failed to write config: {e}")) from e

        if is_json_output(json_output):
            echo_json(
                {
                    "folder": config.folder,
                    "config": str(get_config_path(Path(root))),
                },
            )
            return
        typer.echo(f"Initialized min-pmt in folder: {config.folder}")
