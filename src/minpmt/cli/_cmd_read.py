"""Read and display commands for min-pmt CLI."""

from __future__ import annotations

import typer

from minpmt import frontmatter
from minpmt.errors import MinPmtError, TicketNotFoundError
from minpmt.models import ticket_to_dict
from minpmt.validators import validate_list_filters

from ._completions import complete_priorities, complete_statuses, complete_ticket_ids
from ._formatting import format_ticket_full, format_ticket_table, sort_for_display
from ._helpers import ROOT_HELP, fail, get_store
from ._json_state import echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register list and view commands."""

    def list_tickets(
        status: str | None = typer.Option(
            None,
            "--status",
            "-s",
            help="Filter by status",
            autocompletion=complete_statuses,
        ),
        priority: str | None = typer.Option(
            None,
            "--priority",
            "-p",
            help="Filter by priority",
            autocompletion=complete_priorities,
        ),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """List all tickets."""
        is_json_output(json_output)
        store = get_store(root)
        try:
            filters = validate_list_filters(
                {"status": status, "priority": priority},
                store.config,
            )
            tickets = sort_for_display(store.list(filters), store.config)
        except MinPmtError as e:
            raise fail(e) from e

        if is_json_output(json_output):
            echo_json([ticket_to_dict(t) for t in tickets])
            return

        if not tickets:
            typer.echo("No tickets found")
            return
        typer.echo(format_ticket_table(tickets, store.config))

    app.command("list")(list_tickets)
    app.command("ls", hidden=True)(list_tickets)

    @app.command()
    def view(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Show a ticket with its full markdown body."""
        is_json_output(json_output)
        store = get_store(root)
        ticket = store.get(ticket_id)
        if ticket is None:
            raise fail(TicketNotFoundError(ticket_id))

        if is_json_output(json_output):
            echo_json(ticket_to_dict(ticket))
            return

        body = frontmatter.parse(ticket.content or "")[1]
        typer.echo(format_ticket_full(ticket, body))
