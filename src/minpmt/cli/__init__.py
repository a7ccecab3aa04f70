"""min-pmt CLI commands for ticket management."""

from __future__ import annotations

import logging

import typer

from ._helpers import SortedGroup

app = typer.Typer(
    help="min-pmt - minimal project management with markdown tickets",
    no_args_is_help=True,
    cls=SortedGroup,
)


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON for all commands",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    from ._json_state import set_json_flag

    set_json_flag(json_output)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


from . import (  # noqa: E402
    _cmd_config,
    _cmd_create,
    _cmd_delete,
    _cmd_init,
    _cmd_mcp,
    _cmd_read,
    _cmd_update,
    _cmd_web,
)

for _mod in (
    _cmd_config,
    _cmd_create,
    _cmd_delete,
    _cmd_init,
    _cmd_mcp,
    _cmd_read,
    _cmd_update,
    _cmd_web,
):
    _mod.register(app)


def main() -> None:
    """Run the min-pmt CLI application."""
    app()
