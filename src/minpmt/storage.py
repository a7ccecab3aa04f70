"""Markdown file storage for tickets.

Each ticket is one ``<id>.md`` file with a YAML front matter header under the
project's ticket folder. There is no in-memory cache: every read walks the
folder again, so the filesystem is the only source of truth. Writes are plain
last-write-wins with no locking.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from minpmt import frontmatter
from minpmt.config import ProjectConfig
from minpmt.errors import (
    FrontMatterError,
    StorageError,
    TicketNotFoundError,
    ValidationError,
)
from minpmt.idgen import generate_ticket_id
from minpmt.models import (
    DEFAULT_STATUS,
    UPDATABLE_FIELDS,
    Ticket,
    header_to_ticket,
    now_timestamp,
    ticket_to_header,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

TICKET_SUFFIX = ".md"

# Body written when the template has no content of its own
DEFAULT_BODY = "\n## Notes\n"


class TicketStore:
    """Creates, lists, updates and deletes ticket files under a project root."""

    def __init__(
        self,
        config: ProjectConfig | None = None,
        root: str | Path = ".",
    ) -> None:
        """Initialize the store.

        Args:
            config: Project configuration (default: built-in defaults)
            root: Project root; tickets live in ``root / config.folder``
        """
        self.config = config or ProjectConfig()
        self.root = Path(root)
        self.tickets_dir = self.root / self.config.folder

    def ensure_ready(self) -> None:
        """Create the ticket folder (and parents) if it does not exist."""
        try:
            self.tickets_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create ticket folder {self.tickets_dir}: {e}"
            raise StorageError(msg) from e

    def _iter_ticket_files(self) -> Iterator[Path]:
        """Yield every markdown file below the ticket folder, recursively."""
        if not self.tickets_dir.is_dir():
            return
        for path in self.tickets_dir.rglob(f"*{TICKET_SUFFIX}"):
            if path.is_file():
                yield path

    def _read(self, path: Path) -> tuple[dict[str, Any], str, str] | None:
        """Read and parse one file, or None if it is not a usable document."""
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Skipping unreadable file %s: %s", path, e)
            return None
        try:
            data, body = frontmatter.parse(raw)
        except FrontMatterError as e:
            logger.debug("Skipping %s: %s", path, e)
            return None
        return data, body, raw

    def _scan(self) -> Iterator[tuple[Path, dict[str, Any], str, Ticket]]:
        """Yield ``(path, header, body, ticket)`` for every valid ticket file."""
        for path in self._iter_ticket_files():
            parsed = self._read(path)
            if parsed is None:
                continue
            data, body, raw = parsed
            ticket = header_to_ticket(data, file_path=str(path), content=raw)
            if ticket is None:
                logger.debug("Skipping %s: front matter lacks id or title", path)
                continue
            yield path, data, body, ticket

    def _find(self, ticket_id: str) -> tuple[Path, dict[str, Any], str, Ticket]:
        for entry in self._scan():
            if entry[3].id == ticket_id:
                return entry
        raise TicketNotFoundError(ticket_id)

    def _write(self, path: Path, content: str) -> None:
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            msg = f"Failed to write ticket file {path}: {e}"
            raise StorageError(msg) from e

    def create(
        self,
        title: str,
        *,
        description: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        labels: list[str] | None = None,
        assignee: str | None = None,
        due: str | None = None,
    ) -> Ticket:
        """Create a new ticket file.

        Args:
            title: Ticket title (required, trimmed)
            description: Optional description
            status: Initial status (default: the template's default status)
            priority: Optional priority
            labels: Optional labels, order preserved
            assignee: Optional assignee
            due: Optional ISO-8601 due date

        Returns:
            The created ticket, including ``file_path`` and ``content``

        Raises:
            ValidationError: If the title is empty
            StorageError: If the file cannot be written
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError([{"field": "title", "message": "title is required"}])

        self.ensure_ready()

        template = self.config.template
        ticket_id = generate_ticket_id(
            title,
            template.id_prefix,
            with_timestamp=template.generate_id,
        )
        now = now_timestamp()
        ticket = Ticket(
            id=ticket_id,
            title=title,
            description=description,
            status=status or template.default_status or DEFAULT_STATUS,
            priority=priority,
            labels=list(labels) if labels is not None else None,
            assignee=assignee,
            created=now,
            updated=now,
            due=due,
        )

        body = f"\n{template.content}\n" if template.content else DEFAULT_BODY
        content = frontmatter.render(ticket_to_header(ticket), body)
        path = self.tickets_dir / f"{ticket_id}{TICKET_SUFFIX}"
        self._write(path, content)

        ticket.file_path = str(path)
        ticket.content = content
        return ticket

    def list(self, filters: dict[str, Any] | None = None) -> list[Ticket]:
        """List tickets, optionally filtered.

        Files without ``id`` or ``title`` in their header are skipped. The
        order follows directory traversal and is not guaranteed.

        Args:
            filters: Optional exact-match filters (status, priority)

        Returns:
            List of matching tickets
        """
        tickets = [entry[3] for entry in self._scan()]

        if not filters:
            return tickets

        if filters.get("status"):
            tickets = [t for t in tickets if t.status == filters["status"]]

        if filters.get("priority"):
            tickets = [t for t in tickets if t.priority == filters["priority"]]

        return tickets

    def get(self, ticket_id: str) -> Ticket | None:
        """Get a ticket by ID.

        Returns:
            The ticket, or None if no file carries this ID
        """
        try:
            return self._find(ticket_id)[3]
        except TicketNotFoundError:
            return None

    def update_status(self, ticket_id: str, status: str) -> None:
        """Set a ticket's status.

        Only ``status`` and ``updated`` change in the header; every other
        key, including ones this tool does not know about, and the body are
        written back untouched.

        Raises:
            TicketNotFoundError: If no ticket has this ID
        """
        path, data, body, ticket = self._find(ticket_id)

        data["status"] = status
        data["updated"] = now_timestamp(after=ticket.updated)
        self._write(path, frontmatter.render(data, body))

    def update_fields(self, ticket_id: str, updates: dict[str, Any]) -> Ticket:
        """Update ticket fields.

        Args:
            ticket_id: The ID of the ticket to update
            updates: Any subset of title, description, status, priority,
                labels, assignee and due. A None value clears an optional
                field. Other keys are ignored.

        Returns:
            The updated ticket

        Raises:
            TicketNotFoundError: If no ticket has this ID
            ValidationError: If the update would leave the title empty
        """
        path, _, body, ticket = self._find(ticket_id)

        for key, value in updates.items():
            if key not in UPDATABLE_FIELDS:
                continue
            if key == "title":
                value = (value or "").strip()
                if not value:
                    raise ValidationError(
                        [{"field": "title", "message": "title must not be empty"}],
                    )
            elif key == "status" and not value:
                value = self.config.template.default_status or DEFAULT_STATUS
            elif key == "labels" and value is not None:
                value = list(value)
            setattr(ticket, key, value)

        ticket.updated = now_timestamp(after=ticket.updated)

        content = frontmatter.render(ticket_to_header(ticket), body)
        self._write(path, content)
        ticket.content = content
        return ticket

    def delete(self, ticket_id: str) -> None:
        """Delete a ticket file. There is no soft delete.

        Raises:
            TicketNotFoundError: If no ticket has this ID
        """
        path = self._find(ticket_id)[0]
        try:
            path.unlink()
        except OSError as e:
            msg = f"Failed to delete ticket file {path}: {e}"
            raise StorageError(msg) from e
