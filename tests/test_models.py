"""Tests for ticket models and timestamp helpers."""

from datetime import date, datetime, timedelta, timezone

from minpmt.models import (
    Priority,
    Ticket,
    format_timestamp,
    header_to_ticket,
    now_timestamp,
    parse_timestamp,
    ticket_to_dict,
    ticket_to_header,
)


class TestTimestamps:
    """Test timestamp formatting and parsing."""

    def test_format_utc_millis(self) -> None:
        """Timestamps are UTC with millisecond precision and a Z suffix."""
        moment = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "2024-05-06T07:08:09.123Z"

    def test_format_converts_offset(self) -> None:
        """Aware datetimes in other zones are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2024, 1, 1, 12, 0, tzinfo=plus_two)
        assert format_timestamp(moment) == "2024-01-01T10:00:00.000Z"

    def test_parse_z_suffix(self) -> None:
        """The Z suffix parses as UTC."""
        parsed = parse_timestamp("2024-01-01T00:00:00.000Z")
        assert parsed == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_parse_naive_is_utc(self) -> None:
        """A timestamp without an offset is taken as UTC."""
        parsed = parse_timestamp("2024-01-01T00:00:00")
        assert parsed is not None
        assert parsed.tzinfo == timezone.utc

    def test_parse_date_only(self) -> None:
        """A bare date is accepted."""
        assert parse_timestamp("2024-01-31") is not None

    def test_parse_invalid(self) -> None:
        """Garbage returns None instead of raising."""
        assert parse_timestamp("next tuesday") is None

    def test_now_after_is_strictly_later(self) -> None:
        """A timestamp from the future is bumped past, not matched."""
        future = "2999-01-01T00:00:00.000Z"
        assert now_timestamp(after=future) == "2999-01-01T00:00:00.001Z"

    def test_now_after_past_is_now(self) -> None:
        """An old previous value does not affect the result."""
        stamp = now_timestamp(after="2000-01-01T00:00:00.000Z")
        assert stamp > "2000-01-01T00:00:00.000Z"
        assert stamp.endswith("Z")


class TestTicket:
    """Test the Ticket dataclass."""

    def test_defaults(self) -> None:
        """New tickets are todo and updated starts equal to created."""
        ticket = Ticket(id="t-1", title="One")
        assert ticket.status == "todo"
        assert ticket.updated == ticket.created
        assert ticket.labels is None

    def test_priority_values(self) -> None:
        """Priorities compare equal to their string values."""
        assert Priority.HIGH == "high"
        assert [p.value for p in Priority] == ["low", "medium", "high", "critical"]


class TestConversion:
    """Test header and dictionary conversion."""

    def test_header_omits_none(self) -> None:
        """Unset optional fields do not appear in the header."""
        ticket = Ticket(
            id="t-1",
            title="One",
            created="2024-01-01T00:00:00.000Z",
            priority="low",
        )
        assert ticket_to_header(ticket) == {
            "id": "t-1",
            "title": "One",
            "status": "todo",
            "priority": "low",
            "created": "2024-01-01T00:00:00.000Z",
            "updated": "2024-01-01T00:00:00.000Z",
        }

    def test_header_keeps_empty_labels(self) -> None:
        """An explicit empty label list is kept."""
        ticket = Ticket(id="t-1", title="One", labels=[])
        assert ticket_to_header(ticket)["labels"] == []

    def test_dict_includes_derived_fields(self) -> None:
        """The JSON form carries filePath and content."""
        ticket = Ticket(id="t-1", title="One", file_path="/x/t-1.md", content="---\n")
        data = ticket_to_dict(ticket)
        assert data["filePath"] == "/x/t-1.md"
        assert data["content"] == "---\n"
        assert "file_path" not in data

    def test_header_to_ticket_requires_id_and_title(self) -> None:
        """Mappings without id or title are not tickets."""
        assert header_to_ticket({"title": "No id"}) is None
        assert header_to_ticket({"id": "no-title"}) is None
        assert header_to_ticket({"id": "", "title": "Empty"}) is None

    def test_header_to_ticket_keeps_unknown_status(self) -> None:
        """Status values outside the vocabulary pass through."""
        ticket = header_to_ticket({"id": "a", "title": "A", "status": "blocked"})
        assert ticket is not None
        assert ticket.status == "blocked"

    def test_header_to_ticket_normalises_yaml_types(self) -> None:
        """YAML dates and numbers become strings."""
        ticket = header_to_ticket(
            {
                "id": 42,
                "title": "Typed",
                "created": datetime(2024, 1, 1, tzinfo=timezone.utc),
                "due": date(2024, 2, 1),
                "labels": ["a", 1],
            },
        )
        assert ticket is not None
        assert ticket.id == "42"
        assert ticket.created == "2024-01-01T00:00:00.000Z"
        assert ticket.due == "2024-02-01"
        assert ticket.labels == ["a", "1"]

    def test_header_to_ticket_ignores_non_list_labels(self) -> None:
        """A scalar labels value is dropped."""
        ticket = header_to_ticket({"id": "a", "title": "A", "labels": "bug"})
        assert ticket is not None
        assert ticket.labels is None

    def test_header_to_ticket_attaches_file_info(self) -> None:
        """File path and raw content are carried along."""
        ticket = header_to_ticket(
            {"id": "a", "title": "A"},
            file_path="/p/a.md",
            content="raw",
        )
        assert ticket is not None
        assert ticket.file_path == "/p/a.md"
        assert ticket.content == "raw"
