"""Web server command for min-pmt CLI."""

from __future__ import annotations

from pathlib import Path

import typer

from minpmt.errors import MinPmtError

from ._helpers import ROOT_HELP, fail, get_store

DEFAULT_PORT = 3000


def register(app: typer.Typer) -> None:
    """Register the web command."""

    @app.command("web")
    def web(
        host: str = typer.Option("127.0.0.1", help="Host to bind to"),
        port: int = typer.Option(DEFAULT_PORT, "--port", "-p", help="Port to listen on"),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
    ) -> None:
        """Start the web board and JSON API."""
        import uvicorn

        from minpmt.web import create_app

        store = get_store(root)
        try:
            store.ensure_ready()
        except MinPmtError as e:
            raise fail(e) from e

        fastapi_app = create_app(root=Path(root), config=store.config)

        typer.echo(f"min-pmt web → http://{host}:{port}")
        uvicorn.run(fastapi_app, host=host, port=port, log_level="warning")
