"""YAML front matter parsing and rendering for markdown ticket files."""

from __future__ import annotations

from typing import Any, cast

import yaml

from minpmt.errors import FrontMatterError

DELIMITER = "---"


def split(text: str) -> tuple[str | None, str]:
    """Split a document into its raw YAML header and body.

    Returns ``(None, text)`` when the document has no header, i.e. it does
    not open with a ``---`` line or the header is never closed.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n").rstrip() != DELIMITER:
        return None, text

    for idx in range(1, len(lines)):
        if lines[idx].rstrip("\r\n").rstrip() == DELIMITER:
            header = "".join(lines[1:idx])
            body = "".join(lines[idx + 1 :])
            return header, body

    return None, text


def parse(text: str) -> tuple[dict[str, Any], str]:
    """Parse a markdown document into ``(metadata, body)``.

    Raises:
        FrontMatterError: If the header is not valid YAML or not a mapping.
    """
    header, body = split(text)
    if header is None:
        return {}, body

    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML front matter: {e}"
        raise FrontMatterError(msg) from e

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        msg = f"Front matter must be a mapping, got {type(data).__name__}"
        raise FrontMatterError(msg)

    return cast("dict[str, Any]", data), body


def render(metadata: dict[str, Any], body: str) -> str:
    """Render metadata and body back into a markdown document.

    Keys keep their insertion order, and ``parse(render(m, body))`` returns
    ``body`` unchanged.
    """
    header = yaml.safe_dump(
        metadata,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    ).rstrip()
    return f"{DELIMITER}\n{header}\n{DELIMITER}\n{body}"
