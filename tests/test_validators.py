"""Tests for payload validation."""

import pytest

from minpmt.config import FieldSchema, ProjectConfig, config_from_dict
from minpmt.errors import ValidationError
from minpmt.validators import (
    parse_labels,
    validate_create,
    validate_list_filters,
    validate_status,
    validate_update,
)


def _fields(exc: pytest.ExceptionInfo[ValidationError]) -> list[str]:
    return [issue["field"] for issue in exc.value.issues]


class TestParseLabels:
    """Test comma-separated label parsing."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("bug,ui", ["bug", "ui"]),
            ("bug, ui, ", ["bug", "ui"]),
            ("", []),
            ("single", ["single"]),
        ],
    )
    def test_parse_labels(self, raw: str, expected: list[str]) -> None:
        """Labels are split, trimmed and empties dropped."""
        assert parse_labels(raw) == expected


class TestValidateCreate:
    """Test create payload validation."""

    def test_minimal(self, config: ProjectConfig) -> None:
        """A title is enough and gets trimmed."""
        assert validate_create({"title": "  Hello "}, config) == {"title": "Hello"}

    def test_full(self, config: ProjectConfig) -> None:
        """All known fields are accepted."""
        payload = {
            "title": "Full",
            "description": "desc",
            "status": "done",
            "priority": "critical",
            "labels": ["a", "b"],
            "assignee": "alice",
            "due": "2025-01-01T00:00:00.000Z",
        }
        assert validate_create(payload, config) == payload

    def test_labels_string_is_split(self, config: ProjectConfig) -> None:
        """A comma-separated string is accepted for labels."""
        cleaned = validate_create({"title": "L", "labels": "a, b"}, config)
        assert cleaned["labels"] == ["a", "b"]

    def test_none_values_dropped(self, config: ProjectConfig) -> None:
        """None for optional fields means not given."""
        cleaned = validate_create({"title": "N", "priority": None}, config)
        assert cleaned == {"title": "N"}

    def test_missing_title(self, config: ProjectConfig) -> None:
        """A missing title is reported."""
        with pytest.raises(ValidationError) as exc:
            validate_create({}, config)
        assert _fields(exc) == ["title"]

    def test_blank_title(self, config: ProjectConfig) -> None:
        """A whitespace-only title is reported."""
        with pytest.raises(ValidationError, match="title"):
            validate_create({"title": "   "}, config)

    def test_collects_all_issues(self, config: ProjectConfig) -> None:
        """Every violated constraint is reported at once."""
        with pytest.raises(ValidationError) as exc:
            validate_create(
                {
                    "status": "blocked",
                    "priority": "urgent",
                    "labels": [1, 2],
                    "due": "soon",
                    "color": "red",
                },
                config,
            )
        assert sorted(_fields(exc)) == [
            "color",
            "due",
            "labels",
            "priority",
            "status",
            "title",
        ]

    def test_non_string_description(self, config: ProjectConfig) -> None:
        """Descriptions must be strings."""
        with pytest.raises(ValidationError, match="expected string"):
            validate_create({"title": "T", "description": 5}, config)

    def test_not_an_object(self, config: ProjectConfig) -> None:
        """Non-mapping payloads are rejected."""
        with pytest.raises(ValidationError, match="expected an object"):
            validate_create(["title"], config)

    def test_custom_status_vocabulary(self) -> None:
        """Allowed statuses follow the schema enum."""
        config = ProjectConfig()
        config.schema["status"] = FieldSchema(enum=["open", "closed"])
        assert validate_create({"title": "T", "status": "open"}, config)["status"] == "open"
        with pytest.raises(ValidationError):
            validate_create({"title": "T", "status": "todo"}, config)


class TestValidateUpdate:
    """Test update payload validation."""

    def test_partial(self, config: ProjectConfig) -> None:
        """Any subset of fields is allowed, title included or not."""
        assert validate_update({"priority": "low"}, config) == {"priority": "low"}

    def test_empty_payload(self, config: ProjectConfig) -> None:
        """An empty update is valid."""
        assert validate_update({}, config) == {}

    def test_none_clears(self, config: ProjectConfig) -> None:
        """None values are kept so the field can be cleared."""
        assert validate_update({"assignee": None, "due": None}, config) == {
            "assignee": None,
            "due": None,
        }

    def test_status_cannot_be_null(self, config: ProjectConfig) -> None:
        """Status must stay a valid value."""
        with pytest.raises(ValidationError) as exc:
            validate_update({"status": None}, config)
        assert _fields(exc) == ["status"]

    def test_blank_title(self, config: ProjectConfig) -> None:
        """An update cannot blank the title."""
        with pytest.raises(ValidationError, match="must not be empty"):
            validate_update({"title": ""}, config)

    def test_immutable_fields_rejected(self, config: ProjectConfig) -> None:
        """id, created and updated are not updatable."""
        with pytest.raises(ValidationError) as exc:
            validate_update({"id": "x", "created": "2024-01-01"}, config)
        assert sorted(_fields(exc)) == ["created", "id"]


class TestValidateStatus:
    """Test single status validation."""

    def test_valid(self, config: ProjectConfig) -> None:
        """Configured statuses pass."""
        assert validate_status("in-progress", config) == "in-progress"

    @pytest.mark.parametrize("value", ["blocked", "", None, 3])
    def test_invalid(self, config: ProjectConfig, value: object) -> None:
        """Anything else fails with a status issue."""
        with pytest.raises(ValidationError) as exc:
            validate_status(value, config)
        assert _fields(exc) == ["status"]


class TestValidateListFilters:
    """Test list filter validation."""

    def test_none(self, config: ProjectConfig) -> None:
        """No filters at all."""
        assert validate_list_filters(None, config) == {}

    def test_blank_values_ignored(self, config: ProjectConfig) -> None:
        """Empty strings and None mean no filter."""
        assert validate_list_filters({"status": "", "priority": None}, config) == {}

    def test_valid(self, config: ProjectConfig) -> None:
        """Known values pass through."""
        assert validate_list_filters({"status": "done", "priority": "high"}, config) == {
            "status": "done",
            "priority": "high",
        }

    def test_invalid_values(self, config: ProjectConfig) -> None:
        """Unknown values and keys are reported."""
        with pytest.raises(ValidationError) as exc:
            validate_list_filters(
                {"status": "blocked", "priority": "urgent", "owner": "me"},
                config,
            )
        assert sorted(_fields(exc)) == ["owner", "priority", "status"]


class TestSchemaRules:
    """Test enforcement of the configured field rules."""

    def test_required_field_on_create(self) -> None:
        """A field marked required must be given on create."""
        config = config_from_dict({"schema": {"assignee": {"type": "string", "required": True}}})

        with pytest.raises(ValidationError) as exc:
            validate_create({"title": "x"}, config)

        assert _fields(exc) == ["assignee"]
        assert validate_create({"title": "x", "assignee": "bob"}, config)["assignee"] == "bob"

    def test_required_field_cannot_be_cleared(self) -> None:
        """An update may omit a required field but not clear it."""
        config = config_from_dict({"schema": {"assignee": {"type": "string", "required": True}}})

        assert validate_update({"title": "y"}, config) == {"title": "y"}
        with pytest.raises(ValidationError, match="assignee is required"):
            validate_update({"assignee": None}, config)

    def test_status_required_is_filled_by_default(self, config: ProjectConfig) -> None:
        """The default schema marks status required; create may still omit it."""
        assert config.schema["status"].required
        assert validate_create({"title": "x"}, config) == {"title": "x"}

    def test_enum_on_other_fields(self) -> None:
        """An enum restricts any field, per item for arrays."""
        config = config_from_dict(
            {
                "schema": {
                    "assignee": {"type": "string", "enum": ["alice", "bob"]},
                    "labels": {"type": "array", "items": "string", "enum": ["bug", "ui"]},
                },
            },
        )

        assert validate_create({"title": "x", "assignee": "alice", "labels": ["ui"]}, config)
        with pytest.raises(ValidationError) as exc:
            validate_create({"title": "x", "assignee": "carol", "labels": ["bug", "docs"]}, config)
        assert sorted(_fields(exc)) == ["assignee", "labels"]
        assert "'docs'" in str(exc.value)

    def test_declared_type_mismatch(self) -> None:
        """A value that does not match the declared type is rejected."""
        config = config_from_dict({"schema": {"description": {"type": "date"}}})

        with pytest.raises(ValidationError, match="expected date"):
            validate_create({"title": "x", "description": "whenever"}, config)
        cleaned = validate_create({"title": "x", "description": "2025-01-01"}, config)
        assert cleaned["description"] == "2025-01-01"

    def test_no_duplicate_issues(self) -> None:
        """A field that fails its built-in check is reported once."""
        config = config_from_dict({"schema": {"assignee": {"type": "string", "required": True}}})
        with pytest.raises(ValidationError) as exc:
            validate_create({"title": "x", "assignee": 5}, config)
        assert _fields(exc) == ["assignee"]
