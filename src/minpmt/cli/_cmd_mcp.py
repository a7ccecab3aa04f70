"""MCP server command for min-pmt CLI."""

from __future__ import annotations

from pathlib import Path

import typer

from ._helpers import ROOT_HELP, get_config


def register(app: typer.Typer) -> None:
    """Register the mcp command."""

    @app.command("mcp")
    def mcp(
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
    ) -> None:
        """Serve the ticket tools to MCP clients over stdio."""
        from minpmt.mcp_server import create_server

        server = create_server(root=Path(root), config=get_config(root))
        server.run()
