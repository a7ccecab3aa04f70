"""Data models for min-pmt tickets using dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any


class Priority(str, Enum):
    """Ticket priority enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


DEFAULT_STATUS = "todo"

# Order of keys in the front matter header
HEADER_FIELDS = (
    "id",
    "title",
    "description",
    "status",
    "priority",
    "labels",
    "assignee",
    "created",
    "updated",
    "due",
)

# Fields that callers are allowed to modify via update_fields().
UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "description",
        "status",
        "priority",
        "labels",
        "assignee",
        "due",
    },
)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string with millisecond precision."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def now_timestamp(after: str | None = None) -> str:
    """Get the current time as an ISO-8601 timestamp.

    Args:
        after: Optional previous timestamp. The result is guaranteed to be
            strictly later than it, bumping by one millisecond if the clock
            has not moved on yet.
    """
    moment = datetime.now(timezone.utc)
    stamp = format_timestamp(moment)
    if after is None:
        return stamp

    previous = parse_timestamp(after)
    if previous is not None and moment <= previous:
        stamp = format_timestamp(previous + timedelta(milliseconds=1))
    return stamp


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None if it is not one."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_text(value: Any) -> str:
    """Convert a header value to text, normalising YAML-typed dates."""
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass
class Ticket:
    """A ticket stored as one markdown file."""

    id: str
    title: str
    status: str = DEFAULT_STATUS
    created: str = field(default_factory=now_timestamp)
    updated: str = ""
    description: str | None = None
    priority: str | None = None
    labels: list[str] | None = None
    assignee: str | None = None
    due: str | None = None
    # Derived from the file, not persisted in the header
    file_path: str | None = None
    content: str | None = None

    def __post_init__(self) -> None:
        if not self.updated:
            self.updated = self.created


def ticket_to_header(ticket: Ticket) -> dict[str, Any]:
    """Convert a Ticket to its front matter mapping.

    Fields that are not set are left out so the header stays minimal.
    """
    header: dict[str, Any] = {}
    for name in HEADER_FIELDS:
        value = getattr(ticket, name)
        if value is None:
            continue
        if name == "labels":
            value = list(value)
        header[name] = value
    return header


def ticket_to_dict(ticket: Ticket) -> dict[str, Any]:
    """Convert a Ticket to a JSON-ready dictionary, including derived fields."""
    data = ticket_to_header(ticket)
    if ticket.file_path is not None:
        data["filePath"] = ticket.file_path
    if ticket.content is not None:
        data["content"] = ticket.content
    return data


def header_to_ticket(
    data: dict[str, Any],
    *,
    file_path: str | None = None,
    content: str | None = None,
) -> Ticket | None:
    """Build a Ticket from a parsed front matter mapping.

    Returns None when the mapping lacks ``id`` or ``title``. Missing
    ``created``/``updated`` values are backfilled with the current time.
    The status is kept as stored, even when it is outside the configured
    vocabulary.
    """
    if not data.get("id") or not data.get("title"):
        return None

    now = now_timestamp()
    labels = data.get("labels")

    return Ticket(
        id=_as_text(data["id"]),
        title=_as_text(data["title"]),
        description=(
            _as_text(data["description"]) if data.get("description") is not None else None
        ),
        status=_as_text(data["status"]) if data.get("status") else DEFAULT_STATUS,
        priority=_as_text(data["priority"]) if data.get("priority") else None,
        labels=[_as_text(lbl) for lbl in labels] if isinstance(labels, list) else None,
        assignee=_as_text(data["assignee"]) if data.get("assignee") is not None else None,
        created=_as_text(data["created"]) if data.get("created") else now,
        updated=_as_text(data["updated"]) if data.get("updated") else now,
        due=_as_text(data["due"]) if data.get("due") else None,
        file_path=file_path,
        content=content,
    )
