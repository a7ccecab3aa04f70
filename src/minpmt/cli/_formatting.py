"""Display and formatting functions for min-pmt CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

if TYPE_CHECKING:
    from minpmt.config import ProjectConfig
    from minpmt.models import Ticket

PRIORITY_COLORS = {
    "critical": "bright_red",
    "high": "yellow",
    "medium": "white",
    "low": "cyan",
}


def sort_for_display(tickets: list[Ticket], config: ProjectConfig) -> list[Ticket]:
    """Order tickets by status column, then by creation time.

    Statuses outside the configured vocabulary sort after the known ones.
    """
    order = {name: idx for idx, name in enumerate(config.status_names())}
    return sorted(tickets, key=lambda t: (order.get(t.status, len(order)), t.created))


def _styled_key(label: str) -> str:
    """Style a field label as bold cyan."""
    return typer.style(label, fg="cyan", bold=True)


def format_ticket_full(ticket: Ticket, body: str | None = None) -> str:
    """Format a ticket for full display."""
    key = _styled_key
    lines = [
        f"{key('ID:')} {ticket.id}",
        f"{key('Title:')} {ticket.title}",
        "",
        f"{key('Status:')} {ticket.status}",
    ]
    if ticket.priority:
        lines.append(f"{key('Priority:')} {ticket.priority}")
    if ticket.assignee:
        lines.append(f"{key('Assignee:')} {ticket.assignee}")
    if ticket.labels:
        lines.append(f"{key('Labels:')} {', '.join(ticket.labels)}")
    lines.append(f"{key('Created:')} {ticket.created}")
    lines.append(f"{key('Updated:')} {ticket.updated}")
    if ticket.due:
        lines.append(f"{key('Due:')} {ticket.due}")
    if ticket.file_path:
        lines.append(f"{key('File:')} {ticket.file_path}")

    if ticket.description:
        lines.extend(["", key("Description:"), ticket.description])

    if body and body.strip():
        lines.extend(["", body.strip()])

    return "\n".join(lines)


def _state_color(status: str, config: ProjectConfig) -> str | None:
    """Get the configured column color for a status, if Rich can parse it."""
    from rich.color import Color, ColorParseError

    state = config.states.get(status)
    if state is None:
        return None
    try:
        Color.parse(state.color)
    except ColorParseError:
        return None
    return state.color


def format_ticket_table(tickets: list[Ticket], config: ProjectConfig) -> str:
    """Format tickets as an aligned table using Rich.

    Returns:
        Formatted table string (rendered by Rich)
    """
    from io import StringIO

    from rich import box
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table

    if not tickets:
        return ""

    table = Table(
        show_header=True,
        header_style="bold",
        box=box.ROUNDED,
        pad_edge=False,
        show_edge=False,
    )
    table.add_column("ID", no_wrap=True)
    table.add_column("Title", overflow="fold")
    table.add_column("Status", no_wrap=True)
    table.add_column("Priority", no_wrap=True)
    table.add_column("Labels", no_wrap=False)

    for ticket in tickets:
        priority = ""
        if ticket.priority:
            color = PRIORITY_COLORS.get(ticket.priority, "white")
            priority = f"[bold {color}]{escape(ticket.priority)}[/]"
        status_color = _state_color(ticket.status, config)
        status = (
            f"[{status_color}]{escape(ticket.status)}[/]"
            if status_color
            else escape(ticket.status)
        )
        labels = ", ".join(escape(lbl) for lbl in ticket.labels or [])
        table.add_row(
            ticket.id,
            escape(ticket.title),
            status,
            priority,
            f"[cyan]{labels}[/]" if labels else "",
        )

    string_io = StringIO()
    console = Console(file=string_io, force_terminal=True, width=None)
    console.print(table)

    return string_io.getvalue().rstrip()
