"""Routes for the min-pmt web server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from minpmt.config import config_to_dict
from minpmt.errors import StorageError, TicketNotFoundError, ValidationError
from minpmt.models import ticket_to_dict
from minpmt.validators import (
    validate_create,
    validate_list_filters,
    validate_status,
    validate_update,
)

if TYPE_CHECKING:
    from minpmt.storage import TicketStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _store(request: Request) -> TicketStore:
    return request.app.state.store


def _invalid(error: str, exc: ValidationError) -> JSONResponse:
    return JSONResponse({"error": error, "issues": exc.issues}, status_code=400)


def _not_found() -> JSONResponse:
    return JSONResponse({"error": "not found"}, status_code=404)


def _internal(exc: Exception) -> JSONResponse:
    logger.exception("Ticket operation failed")
    return JSONResponse({"error": str(exc) or "Internal error"}, status_code=500)


@router.get("/api/tickets")
def list_tickets(
    request: Request,
    status: str | None = None,
    priority: str | None = None,
) -> Response:
    """List tickets, optionally filtered by status and priority."""
    store = _store(request)
    try:
        filters = validate_list_filters(
            {"status": status, "priority": priority},
            store.config,
        )
        tickets = store.list(filters)
    except ValidationError as e:
        return _invalid("Invalid query", e)
    except StorageError as e:
        return _internal(e)
    return JSONResponse([ticket_to_dict(t) for t in tickets])


@router.get("/api/tickets/{ticket_id}")
def get_ticket(request: Request, ticket_id: str) -> Response:
    """Fetch a single ticket."""
    ticket = _store(request).get(ticket_id)
    if ticket is None:
        return _not_found()
    return JSONResponse(ticket_to_dict(ticket))


@router.post("/api/tickets")
def create_ticket(
    request: Request,
    payload: Any = Body(default=None),
) -> Response:
    """Create a ticket from a JSON body."""
    store = _store(request)
    try:
        data = validate_create(payload if payload is not None else {}, store.config)
        ticket = store.create(**data)
    except ValidationError as e:
        return _invalid("Invalid body", e)
    except StorageError as e:
        return _internal(e)
    logger.info("Ticket created: %s", ticket.id)
    return JSONResponse(ticket_to_dict(ticket), status_code=201)


@router.patch("/api/tickets/{ticket_id}/status")
def update_ticket_status(
    request: Request,
    ticket_id: str,
    payload: Any = Body(default=None),
) -> Response:
    """Move a ticket to a new status."""
    store = _store(request)
    body: dict[str, Any] = payload if isinstance(payload, dict) else {}
    try:
        status = validate_status(body.get("status"), store.config)
        store.update_status(ticket_id, status)
    except ValidationError as e:
        return _invalid("Invalid body", e)
    except TicketNotFoundError:
        return _not_found()
    except StorageError as e:
        return _internal(e)
    logger.info("Ticket %s moved to %s", ticket_id, status)
    return JSONResponse({"ok": True})


@router.patch("/api/tickets/{ticket_id}")
def update_ticket(
    request: Request,
    ticket_id: str,
    payload: Any = Body(default=None),
) -> Response:
    """Update one or more ticket fields."""
    store = _store(request)
    try:
        data = validate_update(payload if payload is not None else {}, store.config)
        ticket = store.update_fields(ticket_id, data)
    except ValidationError as e:
        return _invalid("Invalid body", e)
    except TicketNotFoundError:
        return _not_found()
    except StorageError as e:
        return _internal(e)
    logger.info("Ticket updated: %s", ticket_id)
    return JSONResponse(ticket_to_dict(ticket))


@router.delete("/api/tickets/{ticket_id}")
def delete_ticket(request: Request, ticket_id: str) -> Response:
    """Delete a ticket file."""
    try:
        _store(request).delete(ticket_id)
    except TicketNotFoundError:
        return _not_found()
    except StorageError as e:
        return _internal(e)
    logger.info("Ticket deleted: %s", ticket_id)
    return Response(status_code=204)


@router.get("/api/config")
def get_config(request: Request) -> Response:
    """Return the project configuration."""
    return JSONResponse(config_to_dict(_store(request).config))


@router.get("/", response_class=HTMLResponse)
def board(request: Request) -> HTMLResponse:
    """Render the board: one column per configured status."""
    store = _store(request)
    config = store.config
    tickets = sorted(store.list(), key=lambda t: t.created)

    known = config.status_names()
    columns: list[dict[str, Any]] = [
        {
            "name": name,
            "color": config.states[name].color,
            "tickets": [t for t in tickets if t.status == name],
        }
        for name in known
    ]
    # Statuses outside the vocabulary still get a column so nothing is hidden
    extra = sorted({t.status for t in tickets} - set(known))
    columns.extend(
        {
            "name": name,
            "color": None,
            "tickets": [t for t in tickets if t.status == name],
        }
        for name in extra
    )

    return request.app.state.templates.TemplateResponse(
        request,
        "board.html",
        {"request": request, "columns": columns, "total": len(tickets)},
    )
