"""Create command for min-pmt CLI."""

from __future__ import annotations

from typing import Any

import typer

from minpmt.errors import MinPmtError
from minpmt.models import ticket_to_dict
from minpmt.validators import validate_create

from ._completions import complete_priorities, complete_statuses
from ._helpers import ROOT_HELP, fail, get_store
from ._json_state import echo_json, is_json_output

_ADD_DOC = """\
Create a new ticket.

Prints the new ticket ID.

Examples:
    min-pmt add "Fix login bug"
    min-pmt add "Fix login bug" -p high -l bug,auth
    min-pmt add "Ship v2" -s in-progress --due 2025-01-31T00:00:00Z\
"""


def register(app: typer.Typer) -> None:
    """Register add command."""

    @app.command("add", help=_ADD_DOC)
    def add(
        title: str = typer.Argument(..., help="Ticket title"),
        description: str | None = typer.Option(
            None,
            "--description",
            "-d",
            help="Ticket description",
        ),
        priority: str | None = typer.Option(
            None,
            "--priority",
            "-p",
            help="Priority level (low, medium, high, critical)",
            autocompletion=complete_priorities,
        ),
        labels: str | None = typer.Option(
            None,
            "--labels",
            "-l",
            help="Comma-separated labels",
        ),
        status: str | None = typer.Option(
            None,
            "--status",
            "-s",
            help="Initial status",
            autocompletion=complete_statuses,
        ),
        assignee: str | None = typer.Option(
            None,
            "--assignee",
            "-a",
            help="Ticket assignee",
        ),
        due: str | None = typer.Option(
            None,
            "--due",
            help="Due date (ISO-8601)",
        ),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        is_json_output(json_output)  # sync local flag for echo_error
        store = get_store(root)

        payload: dict[str, Any] = {"title": title}
        for key, value in (
            ("description", description),
            ("priority", priority),
            ("labels", labels),
            ("status", status),
            ("assignee", assignee),
            ("due", due),
        ):
            if value is not None:
                payload[key] = value

        try:
            data = validate_create(payload, store.config)
            ticket = store.create(**data)
        except MinPmtError as e:
            raise fail(e) from e

        if is_json_output(json_output):
            echo_json(ticket_to_dict(ticket))
        else:
            typer.echo(ticket.id)
