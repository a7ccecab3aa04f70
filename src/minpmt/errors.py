"""Exception types raised by the min-pmt core."""

from __future__ import annotations

from typing import Any


class MinPmtError(Exception):
    """Base class for min-pmt errors."""


class ValidationError(MinPmtError, ValueError):
    """Input failed schema or shape checks.

    ``issues`` holds one ``{"field": ..., "message": ...}`` record per
    violated constraint so callers can report all of them at once.
    """

    def __init__(self, issues: list[dict[str, Any]], message: str | None = None) -> None:
        self.issues = issues
        if message is None:
            message = "; ".join(
                f"{issue['field']}: {issue['message']}" if issue.get("field") else issue["message"]
                for issue in issues
            )
        super().__init__(message)


class TicketNotFoundError(MinPmtError, LookupError):
    """No ticket carries the requested id."""

    def __init__(self, ticket_id: str) -> None:
        self.ticket_id = ticket_id
        super().__init__(f"Ticket not found: {ticket_id}")


class StorageError(MinPmtError, RuntimeError):
    """The underlying filesystem operation failed."""


class ConfigError(MinPmtError, ValueError):
    """The project configuration file could not be read or is invalid."""


class FrontMatterError(MinPmtError, ValueError):
    """A markdown document carries an unparseable front matter header."""
