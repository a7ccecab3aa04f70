"""Shell completion callbacks for min-pmt CLI."""

from __future__ import annotations

from typing import Any

from ._helpers import get_store

# Return (value, help_text) tuples so Typer generates "value":"description"
# pairs in the zsh completion output.


def _root_from_ctx(ctx: Any) -> str:
    params: dict[str, object] = getattr(ctx, "params", None) or {}
    root = params.get("root")
    return str(root) if isinstance(root, str) else "."


def complete_ticket_ids(
    ctx: Any,
    args: list[str],  # noqa: ARG001 (always [] from Typer, kept for signature compat)
    incomplete: str,
) -> list[tuple[str, str]]:
    """Complete ticket IDs from the ticket folder."""
    try:
        store = get_store(_root_from_ctx(ctx))
        return sorted(
            (t.id, t.title) for t in store.list() if t.id.startswith(incomplete)
        )
    except Exception:
        return []


def complete_statuses(
    ctx: Any,
    args: list[str],  # noqa: ARG001
    incomplete: str,
) -> list[tuple[str, str]]:
    """Complete status values from the project config."""
    try:
        store = get_store(_root_from_ctx(ctx))
        return [
            (name, "status")
            for name in store.config.allowed_statuses()
            if name.startswith(incomplete)
        ]
    except Exception:
        return []


def complete_priorities(
    ctx: Any,
    args: list[str],  # noqa: ARG001
    incomplete: str,
) -> list[tuple[str, str]]:
    """Complete priority values from the project config."""
    try:
        store = get_store(_root_from_ctx(ctx))
        return [
            (name, "priority")
            for name in store.config.priorities()
            if name.startswith(incomplete)
        ]
    except Exception:
        return []
