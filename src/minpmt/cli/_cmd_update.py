"""Move and edit commands for min-pmt CLI."""

from __future__ import annotations

from typing import Any

import typer

from minpmt.errors import MinPmtError
from minpmt.models import ticket_to_dict
from minpmt.validators import validate_status, validate_update

from ._completions import complete_priorities, complete_statuses, complete_ticket_ids
from ._helpers import ROOT_HELP, fail, get_store
from ._json_state import echo_error, echo_json, is_json_output


def register(app: typer.Typer) -> None:
    """Register move and edit commands."""

    @app.command()
    def move(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        new_status: str = typer.Argument(
            ...,
            help="New status",
            autocompletion=complete_statuses,
        ),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Move a ticket to a different status."""
        is_json_output(json_output)
        store = get_store(root)
        try:
            status = validate_status(new_status, store.config)
            store.update_status(ticket_id, status)
        except MinPmtError as e:
            raise fail(e) from e

        if is_json_output(json_output):
            echo_json({"id": ticket_id, "status": status})
        else:
            typer.echo(f"Updated {ticket_id} -> {status}")

    @app.command()
    def edit(
        ticket_id: str = typer.Argument(
            ...,
            help="Ticket ID",
            autocompletion=complete_ticket_ids,
        ),
        title: str | None = typer.Option(None, "--title", "-t", help="New title"),
        description: str | None = typer.Option(
            None,
            "--description",
            "-d",
            help="New description",
        ),
        status: str | None = typer.Option(
            None,
            "--status",
            "-s",
            help="New status",
            autocompletion=complete_statuses,
        ),
        priority: str | None = typer.Option(
            None,
            "--priority",
            "-p",
            help="New priority",
            autocompletion=complete_priorities,
        ),
        labels: str | None = typer.Option(
            None,
            "--labels",
            "-l",
            help="Replace labels (comma-separated)",
        ),
        assignee: str | None = typer.Option(
            None,
            "--assignee",
            "-a",
            help="New assignee",
        ),
        due: str | None = typer.Option(None, "--due", help="New due date (ISO-8601)"),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Update one or more fields of a ticket."""
        is_json_output(json_output)

        updates: dict[str, Any] = {}
        for key, value in (
            ("title", title),
            ("description", description),
            ("status", status),
            ("priority", priority),
            ("labels", labels),
            ("assignee", assignee),
            ("due", due),
        ):
            if value is not None:
                updates[key] = value

        if not updates:
            echo_error("No updates specified")
            raise typer.Exit(1)

        store = get_store(root)
        try:
            data = validate_update(updates, store.config)
            ticket = store.update_fields(ticket_id, data)
        except MinPmtError as e:
            raise fail(e) from e

        if is_json_output(json_output):
            echo_json(ticket_to_dict(ticket))
        else:
            typer.echo(f"✓ Updated {ticket.id}: {ticket.title}")
