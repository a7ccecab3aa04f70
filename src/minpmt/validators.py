"""Payload validation for ticket operations.

Pure validation logic with no CLI or web dependencies. Every check adds an
issue record instead of stopping at the first failure, so callers can show
all violated constraints at once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from minpmt.errors import ValidationError
from minpmt.models import UPDATABLE_FIELDS, parse_timestamp

if TYPE_CHECKING:
    from minpmt.config import FieldSchema, ProjectConfig

_CREATE_FIELDS = UPDATABLE_FIELDS
_FILTER_FIELDS = frozenset({"status", "priority"})
# Required on create but defaulted by the store when omitted
_STORE_FILLED = frozenset({"status"})


def parse_labels(raw: str) -> list[str]:
    """Parse a comma-separated labels string.

    Examples:
        "bug,ui"      -> ["bug", "ui"]
        "bug, ui, "   -> ["bug", "ui"]
        ""            -> []
    """
    return [lbl.strip() for lbl in raw.split(",") if lbl.strip()]


def _issue(field: str, message: str) -> dict[str, str]:
    return {"field": field, "message": message}


def _check_string(
    payload: dict[str, Any],
    field: str,
    issues: list[dict[str, str]],
    cleaned: dict[str, Any],
) -> None:
    value = payload[field]
    if value is None:
        cleaned[field] = None
    elif not isinstance(value, str):
        issues.append(_issue(field, f"expected string, got {type(value).__name__}"))
    else:
        cleaned[field] = value


def _check_enum(
    payload: dict[str, Any],
    field: str,
    allowed: list[str],
    issues: list[dict[str, str]],
    cleaned: dict[str, Any],
    *,
    nullable: bool = True,
) -> None:
    value = payload[field]
    if value is None and nullable:
        cleaned[field] = None
    elif not isinstance(value, str) or value not in allowed:
        issues.append(
            _issue(
                field,
                f"invalid value {value!r}, expected one of: {', '.join(allowed)}",
            ),
        )
    else:
        cleaned[field] = value


def _check_labels(
    payload: dict[str, Any],
    issues: list[dict[str, str]],
    cleaned: dict[str, Any],
) -> None:
    value = payload["labels"]
    if value is None:
        cleaned["labels"] = None
    elif isinstance(value, str):
        cleaned["labels"] = parse_labels(value)
    elif isinstance(value, list):
        items = cast("list[Any]", value)
        bad = [item for item in items if not isinstance(item, str)]
        if bad:
            issues.append(_issue("labels", "expected a list of strings"))
        else:
            cleaned["labels"] = list(items)
    else:
        issues.append(_issue("labels", "expected a list of strings"))


def _check_datetime(
    payload: dict[str, Any],
    field: str,
    issues: list[dict[str, str]],
    cleaned: dict[str, Any],
) -> None:
    value = payload[field]
    if value is None:
        cleaned[field] = None
    elif not isinstance(value, str) or parse_timestamp(value) is None:
        issues.append(_issue(field, f"invalid ISO-8601 datetime {value!r}"))
    else:
        cleaned[field] = value


def _validate_fields(
    payload: Any,
    config: ProjectConfig,
    *,
    require_title: bool,
) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError([_issue("", "expected an object")])
    data = cast("dict[str, Any]", payload)

    issues: list[dict[str, str]] = []
    cleaned: dict[str, Any] = {}

    issues.extend(
        _issue(key, "unknown field") for key in data if key not in _CREATE_FIELDS
    )

    if "title" in data:
        title = data["title"]
        if not isinstance(title, str):
            issues.append(_issue("title", "title is required"))
        elif not title.strip():
            issues.append(_issue("title", "title must not be empty"))
        else:
            cleaned["title"] = title.strip()
    elif require_title:
        issues.append(_issue("title", "title is required"))

    for name in ("description", "assignee"):
        if name in data:
            _check_string(data, name, issues, cleaned)

    if "status" in data:
        _check_enum(
            data,
            "status",
            config.allowed_statuses(),
            issues,
            cleaned,
            nullable=False,
        )
    if "priority" in data:
        _check_enum(data, "priority", config.priorities(), issues, cleaned)
    if "labels" in data:
        _check_labels(data, issues, cleaned)
    if "due" in data:
        _check_datetime(data, "due", issues, cleaned)

    _check_schema(cleaned, config, issues, creating=require_title)

    if issues:
        raise ValidationError(issues)
    return cleaned


def _matches_type(value: Any, rule: FieldSchema) -> bool:
    """Check a value against a schema rule's ``type`` and ``items``."""
    checks: dict[str, Any] = {
        "string": lambda v: isinstance(v, str),
        "date": lambda v: isinstance(v, str) and parse_timestamp(v) is not None,
        "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
        "boolean": lambda v: isinstance(v, bool),
    }
    if rule.type == "array":
        if not isinstance(value, list):
            return False
        item_check = checks.get(rule.items or "")
        return item_check is None or all(
            item_check(item) for item in cast("list[Any]", value)
        )
    check = checks.get(rule.type)
    return check is None or check(value)


def _check_schema(
    cleaned: dict[str, Any],
    config: ProjectConfig,
    issues: list[dict[str, str]],
    *,
    creating: bool,
) -> None:
    """Apply the configured field rules to already shape-checked values.

    Fields that already have an issue are not reported twice. ``status`` is
    exempt from ``required`` on create since the store fills in the default,
    and its enum (like priority's) is checked against the config vocabulary.
    """
    flagged = {issue["field"] for issue in issues}
    for name, rule in config.schema.items():
        if name not in _CREATE_FIELDS or name in flagged:
            continue
        value = cleaned.get(name)
        if value is None:
            missing = name in cleaned or (creating and name not in _STORE_FILLED)
            if rule.required and missing:
                issues.append(_issue(name, f"{name} is required"))
            continue
        if not _matches_type(value, rule):
            issues.append(_issue(name, f"expected {rule.type}"))
        elif rule.enum is not None and name not in _FILTER_FIELDS:
            values = value if isinstance(value, list) else [value]
            bad = [v for v in cast("list[Any]", values) if v not in rule.enum]
            if bad:
                issues.append(
                    _issue(
                        name,
                        f"invalid value {bad[0]!r}, expected one of: "
                        f"{', '.join(rule.enum)}",
                    ),
                )


def validate_create(payload: Any, config: ProjectConfig) -> dict[str, Any]:
    """Validate a create payload.

    Returns:
        The cleaned payload (title trimmed, labels as a list). Optional
        fields given as None are dropped.

    Raises:
        ValidationError: With one issue per violated constraint
    """
    cleaned = _validate_fields(payload, config, require_title=True)
    return {key: value for key, value in cleaned.items() if value is not None}


def validate_update(payload: Any, config: ProjectConfig) -> dict[str, Any]:
    """Validate a field-update payload.

    Every field is optional; a None value clears an optional field.

    Raises:
        ValidationError: With one issue per violated constraint
    """
    return _validate_fields(payload, config, require_title=False)


def validate_status(value: Any, config: ProjectConfig) -> str:
    """Validate a status value against the configured vocabulary.

    Raises:
        ValidationError: If the status is not allowed
    """
    issues: list[dict[str, str]] = []
    cleaned: dict[str, Any] = {}
    _check_enum(
        {"status": value},
        "status",
        config.allowed_statuses(),
        issues,
        cleaned,
        nullable=False,
    )
    if issues:
        raise ValidationError(issues)
    return cleaned["status"]


def validate_list_filters(payload: Any, config: ProjectConfig) -> dict[str, str]:
    """Validate list filters; None or empty values mean "no filter".

    Raises:
        ValidationError: If a filter value is not allowed
    """
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError([_issue("", "expected an object")])
    data = {
        key: value
        for key, value in cast("dict[str, Any]", payload).items()
        if value not in (None, "")
    }

    issues: list[dict[str, str]] = [
        _issue(key, "unknown filter") for key in data if key not in _FILTER_FIELDS
    ]
    cleaned: dict[str, Any] = {}
    if "status" in data:
        _check_enum(data, "status", config.allowed_statuses(), issues, cleaned)
    if "priority" in data:
        _check_enum(data, "priority", config.priorities(), issues, cleaned)

    if issues:
        raise ValidationError(issues)
    return cleaned
