"""MCP server exposing min-pmt ticket tools to AI assistants.

Tool arguments keep the camelCase names (``ticketId``, ``newStatus``) that
existing min-pmt MCP clients send.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import orjson
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations

from minpmt._version import version as _version
from minpmt.config import ProjectConfig, config_to_dict
from minpmt.errors import MinPmtError
from minpmt.models import ticket_to_dict
from minpmt.storage import TicketStore
from minpmt.validators import (
    validate_create,
    validate_list_filters,
    validate_status,
    validate_update,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "min-pmt-mcp"


def _dumps(data: Any, *, indent: bool = False) -> str:
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=option).decode()


class TicketTools:
    """Implementation of the MCP tools over a TicketStore.

    Every method returns the text payload of the tool result and raises
    ``ToolError`` for failures, which FastMCP reports as an error result.
    """

    def __init__(self, store: TicketStore) -> None:
        self.store = store

    @property
    def config(self) -> ProjectConfig:
        return self.store.config

    def create_ticket(self, args: dict[str, Any]) -> str:
        try:
            data = validate_create(args, self.config)
            ticket = self.store.create(**data)
        except MinPmtError as e:
            raise ToolError(str(e)) from e
        return _dumps(ticket_to_dict(ticket))

    def list_tickets(self, status: str | None, priority: str | None) -> str:
        try:
            filters = validate_list_filters(
                {"status": status, "priority": priority},
                self.config,
            )
            tickets = self.store.list(filters)
        except MinPmtError as e:
            raise ToolError(str(e)) from e
        return _dumps([ticket_to_dict(t) for t in tickets])

    def get_ticket(self, ticket_id: str) -> str:
        ticket = self.store.get(ticket_id)
        if ticket is None:
            raise ToolError("not found")
        return _dumps(ticket_to_dict(ticket))

    def move_ticket(self, ticket_id: str, new_status: str) -> str:
        try:
            status = validate_status(new_status, self.config)
            self.store.update_status(ticket_id, status)
        except MinPmtError as e:
            raise ToolError(str(e)) from e
        return "ok"

    def update_ticket(self, ticket_id: str, fields: dict[str, Any]) -> str:
        try:
            data = validate_update(fields, self.config)
            ticket = self.store.update_fields(ticket_id, data)
        except MinPmtError as e:
            raise ToolError(str(e)) from e
        return _dumps(ticket_to_dict(ticket))

    def delete_ticket(self, ticket_id: str) -> str:
        try:
            self.store.delete(ticket_id)
        except MinPmtError as e:
            raise ToolError(str(e)) from e
        return "deleted"

    def get_config(self) -> str:
        return _dumps(config_to_dict(self.config), indent=True)


def create_server(
    root: str | Path = ".",
    config: ProjectConfig | None = None,
) -> FastMCP:
    """Create the FastMCP server with all ticket tools registered.

    Args:
        root: Project root directory.
        config: Project configuration (default: built-in defaults).
    """
    tools = TicketTools(TicketStore(config, root=Path(root)))
    server = FastMCP(SERVER_NAME)
    logger.debug("Creating %s %s for %s", SERVER_NAME, _version, root)

    @server.tool(
        name="create-ticket",
        description="Create a ticket with optional metadata",
        annotations=ToolAnnotations(
            title="Create Ticket",
            idempotentHint=False,
            openWorldHint=False,
            readOnlyHint=False,
        ),
    )
    def create_ticket(
        title: str,
        description: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        labels: list[str] | None = None,
        assignee: str | None = None,
        due: str | None = None,
    ) -> str:
        args = {
            key: value
            for key, value in {
                "title": title,
                "description": description,
                "status": status,
                "priority": priority,
                "labels": labels,
                "assignee": assignee,
                "due": due,
            }.items()
            if value is not None
        }
        return tools.create_ticket(args)

    @server.tool(
        name="list-tickets",
        description="List tickets, optionally filtering by status and priority",
        annotations=ToolAnnotations(
            title="List Tickets",
            idempotentHint=True,
            readOnlyHint=True,
        ),
    )
    def list_tickets(status: str | None = None, priority: str | None = None) -> str:
        return tools.list_tickets(status, priority)

    @server.tool(
        name="get-ticket",
        description="Get a ticket by ID",
        annotations=ToolAnnotations(
            title="Get Ticket",
            idempotentHint=True,
            readOnlyHint=True,
        ),
    )
    def get_ticket(ticketId: str) -> str:  # noqa: N803
        return tools.get_ticket(ticketId)

    @server.tool(
        name="move-ticket",
        description="Move a ticket to a new status",
        annotations=ToolAnnotations(
            title="Move Ticket",
            idempotentHint=True,
            destructiveHint=False,
        ),
    )
    def move_ticket(ticketId: str, newStatus: str) -> str:  # noqa: N803
        return tools.move_ticket(ticketId, newStatus)

    @server.tool(
        name="update-ticket",
        description=(
            "Update one or more fields on a ticket by ID. Fields can include "
            "title, description, status, priority, labels, assignee, due."
        ),
        annotations=ToolAnnotations(
            title="Update Ticket",
            idempotentHint=True,
            destructiveHint=False,
        ),
    )
    def update_ticket(ticketId: str, fields: dict[str, Any]) -> str:  # noqa: N803
        return tools.update_ticket(ticketId, fields)

    @server.tool(
        name="delete-ticket",
        description="Permanently delete a ticket by its ID",
        annotations=ToolAnnotations(
            title="Delete Ticket",
            idempotentHint=False,
            destructiveHint=True,
        ),
    )
    def delete_ticket(ticketId: str) -> str:  # noqa: N803
        return tools.delete_ticket(ticketId)

    @server.tool(
        name="get-config",
        description=(
            "Get the current project configuration including templates, "
            "states, and schema"
        ),
        annotations=ToolAnnotations(
            title="Get Configuration",
            idempotentHint=True,
            readOnlyHint=True,
        ),
    )
    def get_config() -> str:
        return tools.get_config()

    return server
