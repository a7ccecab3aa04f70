"""Slug and timestamp based ID generation for tickets."""

from __future__ import annotations

import re
import time

DEFAULT_ID_PREFIX = "ticket-"

# Fallback token when a title has no alphanumeric characters
EMPTY_SLUG = "item"

SLUG_MAX_LENGTH = 32

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(title: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Derive a lowercase, hyphen-delimited slug from a title.

    Examples:
        "Fix login bug"   -> "fix-login-bug"
        "  API: v2!  "    -> "api-v2"
        "???"             -> ""
    """
    slug = _NON_ALNUM.sub("-", title.lower()).strip("-")
    return slug[:max_length]


def base36(num: int) -> str:
    """Encode a non-negative integer as base36 (0-9, a-z)."""
    if num == 0:
        return "0"

    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    result: list[str] = []
    while num:
        result.append(digits[num % 36])
        num //= 36
    return "".join(reversed(result))


def generate_ticket_id(
    title: str,
    prefix: str = DEFAULT_ID_PREFIX,
    *,
    timestamp_ms: int | None = None,
    with_timestamp: bool = True,
) -> str:
    """Generate an ID for a new ticket.

    Args:
        title: Ticket title the slug is derived from.
        prefix: Prefix prepended to the ID (default: "ticket-").
        timestamp_ms: Milliseconds since the epoch (default: now).
        with_timestamp: Append the base36 timestamp suffix.

    Returns:
        ID like ``ticket-fix-login-bug-lx2k9f3a``.
    """
    slug = slugify(title) or EMPTY_SLUG
    if not with_timestamp:
        return f"{prefix}{slug}"
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"{prefix}{slug}-{base36(timestamp_ms)}"
