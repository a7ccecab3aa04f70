"""Configuration file handling for min-pmt."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

import orjson

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from minpmt.errors import ConfigError
from minpmt.idgen import DEFAULT_ID_PREFIX
from minpmt.models import DEFAULT_STATUS, Priority

logger = logging.getLogger(__name__)

# Default folder holding ticket files, relative to the project root
DEFAULT_FOLDER = "pmt"

# Config filenames, in lookup order
CONFIG_FILENAME = "min-pmt.toml"
JSON_CONFIG_FILENAME = "min-pmt.json"

# camelCase spellings accepted for template keys
_TEMPLATE_KEY_ALIASES = {
    "defaultStatus": "default_status",
    "generateId": "generate_id",
    "idPrefix": "id_prefix",
}


@dataclass
class StateConfig:
    """Display settings for one status column."""

    color: str = "#6b7280"
    order: int = 0


@dataclass
class FieldSchema:
    """Validation rule for a single ticket field."""

    type: str = "string"
    required: bool = False
    enum: list[str] | None = None
    items: str | None = None


@dataclass
class TemplateConfig:
    """Settings applied when creating tickets."""

    default_status: str = DEFAULT_STATUS
    generate_id: bool = True
    id_prefix: str = DEFAULT_ID_PREFIX
    content: str | None = None


def default_states() -> dict[str, StateConfig]:
    """Get the default status columns."""
    return {
        "todo": StateConfig(color="#6b7280", order=1),
        "in-progress": StateConfig(color="#3b82f6", order=2),
        "done": StateConfig(color="#10b981", order=3),
    }


def default_schema() -> dict[str, FieldSchema]:
    """Get the default field rules."""
    return {
        "title": FieldSchema(type="string", required=True),
        "description": FieldSchema(type="string"),
        "status": FieldSchema(
            type="string",
            required=True,
            enum=["todo", "in-progress", "done"],
        ),
        "priority": FieldSchema(type="string", enum=[p.value for p in Priority]),
        "labels": FieldSchema(type="array", items="string"),
        "assignee": FieldSchema(type="string"),
        "created": FieldSchema(type="date", required=True),
        "updated": FieldSchema(type="date", required=True),
        "due": FieldSchema(type="date"),
    }


@dataclass
class ProjectConfig:
    """Project-level configuration, read-only to the ticket store."""

    folder: str = DEFAULT_FOLDER
    states: dict[str, StateConfig] = field(default_factory=default_states)
    schema: dict[str, FieldSchema] = field(default_factory=default_schema)
    template: TemplateConfig = field(default_factory=TemplateConfig)

    def status_names(self) -> list[str]:
        """Get the configured statuses, ordered by their column order."""
        return [
            name
            for name, _ in sorted(self.states.items(), key=lambda item: item[1].order)
        ]

    def allowed_statuses(self) -> list[str]:
        """Get the statuses accepted on input.

        An explicit ``schema.status.enum`` wins over the state names.
        """
        rule = self.schema.get("status")
        if rule is not None and rule.enum:
            return list(rule.enum)
        return self.status_names()

    def priorities(self) -> list[str]:
        """Get the accepted priority values."""
        rule = self.schema.get("priority")
        if rule is not None and rule.enum:
            return list(rule.enum)
        return [p.value for p in Priority]


def _parse_states(raw: Any) -> dict[str, StateConfig]:
    if not isinstance(raw, dict):
        msg = "'states' must be a table of status names"
        raise ConfigError(msg)
    states: dict[str, StateConfig] = {}
    for name, value in cast("dict[str, Any]", raw).items():
        value = value or {}
        if not isinstance(value, dict):
            msg = f"State '{name}' must be a table"
            raise ConfigError(msg)
        try:
            order = int(value.get("order", len(states) + 1))
        except (TypeError, ValueError) as e:
            msg = f"State '{name}' has an invalid order: {value.get('order')!r}"
            raise ConfigError(msg) from e
        states[str(name)] = StateConfig(
            color=str(value.get("color", StateConfig.color)),
            order=order,
        )
    return states


def _parse_schema(raw: Any) -> dict[str, FieldSchema]:
    if not isinstance(raw, dict):
        msg = "'schema' must be a table of field names"
        raise ConfigError(msg)
    schema = default_schema()
    for name, value in cast("dict[str, Any]", raw).items():
        if not isinstance(value, dict):
            msg = f"Schema entry '{name}' must be a table"
            raise ConfigError(msg)
        enum = value.get("enum")
        schema[str(name)] = FieldSchema(
            type=str(value.get("type", "string")),
            required=bool(value.get("required", False)),
            enum=[str(v) for v in enum] if isinstance(enum, list) else None,
            items=str(value["items"]) if value.get("items") else None,
        )
    return schema


def _parse_template(raw: Any) -> TemplateConfig:
    if not isinstance(raw, dict):
        msg = "'template' must be a table"
        raise ConfigError(msg)
    values = {
        _TEMPLATE_KEY_ALIASES.get(key, key): value
        for key, value in cast("dict[str, Any]", raw).items()
    }
    template = TemplateConfig()
    if "default_status" in values:
        template.default_status = str(values["default_status"])
    if "generate_id" in values:
        template.generate_id = bool(values["generate_id"])
    if "id_prefix" in values:
        template.id_prefix = str(values["id_prefix"])
    if values.get("content") is not None:
        template.content = str(values["content"])
    return template


def config_from_dict(data: dict[str, Any]) -> ProjectConfig:
    """Build a ProjectConfig from a raw mapping, merged over the defaults.

    Raises:
        ConfigError: If a section has the wrong shape.
    """
    config = ProjectConfig()
    if "folder" in data:
        folder = str(data["folder"]).strip()
        if not folder:
            msg = "'folder' must not be empty"
            raise ConfigError(msg)
        config.folder = folder
    if "states" in data:
        config.states = _parse_states(data["states"])
        # Keep the status rule in step with custom states unless set explicitly
        raw_schema = data.get("schema") or {}
        if "status" not in raw_schema:
            config.schema["status"].enum = config.status_names()
    if "schema" in data:
        custom = _parse_schema(data["schema"])
        if "status" not in data["schema"]:
            custom["status"] = config.schema["status"]
        config.schema = custom
    if "template" in data:
        config.template = _parse_template(data["template"])
    return config


def config_to_dict(config: ProjectConfig) -> dict[str, Any]:
    """Convert a ProjectConfig to a plain dictionary (TOML/JSON friendly)."""
    schema: dict[str, Any] = {}
    for name, rule in config.schema.items():
        entry: dict[str, Any] = {"type": rule.type, "required": rule.required}
        if rule.enum is not None:
            entry["enum"] = list(rule.enum)
        if rule.items is not None:
            entry["items"] = rule.items
        schema[name] = entry

    template: dict[str, Any] = {
        "default_status": config.template.default_status,
        "generate_id": config.template.generate_id,
        "id_prefix": config.template.id_prefix,
    }
    if config.template.content is not None:
        template["content"] = config.template.content

    return {
        "folder": config.folder,
        "states": {
            name: {"color": state.color, "order": state.order}
            for name, state in config.states.items()
        },
        "schema": schema,
        "template": template,
    }


def get_config_path(root: str | Path) -> Path:
    """Get the path to the TOML config file.

    Args:
        root: Project root directory

    Returns:
        Path to min-pmt.toml
    """
    return Path(root) / CONFIG_FILENAME


def load_raw_config(root: str | Path) -> dict[str, Any]:
    """Load the raw configuration mapping from the project root.

    ``min-pmt.toml`` is preferred; ``min-pmt.json`` is the fallback.

    Returns:
        Configuration dictionary, or empty dict if no config exists

    Raises:
        ConfigError: If a config file exists but cannot be read or parsed
    """
    toml_path = get_config_path(root)
    json_path = Path(root) / JSON_CONFIG_FILENAME

    if toml_path.exists():
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except (tomllib.TOMLDecodeError, OSError) as e:
            msg = f"Failed to read {toml_path}: {e}"
            raise ConfigError(msg) from e

    if json_path.exists():
        try:
            data = orjson.loads(json_path.read_bytes())
        except (orjson.JSONDecodeError, OSError) as e:
            msg = f"Failed to read {json_path}: {e}"
            raise ConfigError(msg) from e
        if not isinstance(data, dict):
            msg = f"{json_path} must contain a JSON object"
            raise ConfigError(msg)
        return cast("dict[str, Any]", data)

    logger.debug("No config file in %s, using defaults", root)
    return {}


def load_config(root: str | Path) -> ProjectConfig:
    """Load the project configuration, falling back to defaults.

    Args:
        root: Project root directory

    Returns:
        The merged ProjectConfig
    """
    return config_from_dict(load_raw_config(root))


def save_config(root: str | Path, config: ProjectConfig) -> Path:
    """Save configuration to min-pmt.toml.

    Args:
        root: Project root directory
        config: Configuration to save

    Returns:
        Path of the written file
    """
    config_path = get_config_path(root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with config_path.open("wb") as f:
        tomli_w.dump(config_to_dict(config), f)
    return config_path


def init_config(root: str | Path, folder: str | None = None) -> ProjectConfig:
    """Write a fresh config file for the project and return it.

    An existing config is kept; only the folder is overridden when given.
    """
    config = load_config(root)
    if folder:
        config.folder = folder
    save_config(root, config)
    return config


def set_config_value(config: ProjectConfig, key: str, value: str) -> ProjectConfig:
    """Set a dotted config key from a string value.

    Supported keys: ``folder``, ``template.<field>``, ``states.<name>.color``
    and ``states.<name>.order``.

    Raises:
        ConfigError: If the key is unknown or the value has the wrong type
    """
    parts = key.split(".")
    if parts == ["folder"]:
        if not value.strip():
            msg = "'folder' must not be empty"
            raise ConfigError(msg)
        config.folder = value.strip()
        return config

    if len(parts) == 2 and parts[0] == "template":
        name = _TEMPLATE_KEY_ALIASES.get(parts[1], parts[1])
        if name == "generate_id":
            lowered = value.strip().lower()
            if lowered not in ("true", "false", "1", "0", "yes", "no"):
                msg = f"Invalid boolean '{value}' for {key}"
                raise ConfigError(msg)
            config.template.generate_id = lowered in ("true", "1", "yes")
        elif name in ("default_status", "id_prefix", "content"):
            setattr(config.template, name, value)
        else:
            msg = f"Unknown config key '{key}'"
            raise ConfigError(msg)
        return config

    if len(parts) == 3 and parts[0] == "states" and parts[2] in ("color", "order"):
        state = config.states.setdefault(
            parts[1],
            StateConfig(order=len(config.states) + 1),
        )
        status_rule = config.schema.get("status")
        if status_rule is not None and status_rule.enum is not None:
            if parts[1] not in status_rule.enum:
                status_rule.enum.append(parts[1])
        if parts[2] == "color":
            state.color = value
        else:
            try:
                state.order = int(value)
            except ValueError:
                msg = f"Invalid integer '{value}' for {key}"
                raise ConfigError(msg) from None
        return config

    msg = f"Unknown config key '{key}'"
    raise ConfigError(msg)


def get_config_value(config: ProjectConfig, key: str) -> Any:
    """Look up a dotted key in the dictionary form of the config.

    Raises:
        ConfigError: If the key does not exist
    """
    node: Any = config_to_dict(config)
    for part in key.split("."):
        lookup = _TEMPLATE_KEY_ALIASES.get(part, part)
        if not isinstance(node, dict) or lookup not in node:
            msg = f"Key '{key}' not found in config"
            raise ConfigError(msg)
        node = cast("dict[str, Any]", node)[lookup]
    return node
