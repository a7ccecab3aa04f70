"""Delete command for min-pmt CLI."""

from __future__ import annotations

import typer

from minpmt.errors import MinPmtError, TicketNotFoundError

from ._completions import complete_ticket_ids
from ._helpers import ROOT_HELP, fail, get_store
from ._json_state import echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register delete command."""

    @app.command()
    def delete(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Permanently delete a ticket file."""
        is_json_output(json_output)
        store = get_store(root)

        ticket = store.get(ticket_id)
        if ticket is None:
            raise fail(TicketNotFoundError(ticket_id))

        if not yes and not typer.confirm(f"Delete {ticket.id} ({ticket.title})?"):
            typer.echo("Aborted")
            raise typer.Exit(1)

        try:
            store.delete(ticket_id)
        except MinPmtError as e:
            raise fail(e) from e

        if is_json_output(json_output):
            echo_json({"id": ticket_id, "deleted": True})
        else:
            typer.echo(f"✓ Deleted {ticket_id}")
