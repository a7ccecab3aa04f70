"""Config management commands for min-pmt CLI."""

from __future__ import annotations

from pathlib import Path

import typer

from minpmt.config import (
    config_to_dict,
    get_config_value,
    save_config,
    set_config_value,
)
from minpmt.errors import ConfigError

from ._helpers import ROOT_HELP, SortedGroup, fail, get_config
from ._json_state import echo_json, is_json_output

config_app = typer.Typer(
    name="config",
    help="Show or change the project configuration.",
    no_args_is_help=True,
    cls=SortedGroup,
)


def register(app: typer.Typer) -> None:
    """Register config commands."""
    app.add_typer(config_app, name="config")

    @config_app.command("show")
    def config_show(
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Show the effective configuration."""
        config = get_config(root)
        data = config_to_dict(config)
        if is_json_output(json_output):
            echo_json(data)
            return

        from rich import box
        from rich.console import Console
        from rich.table import Table

        typer.echo(f"folder = {config.folder}")
        table = Table(title="States", box=box.ROUNDED, show_edge=False)
        table.add_column("Status")
        table.add_column("Color")
        table.add_column("Order", justify="right")
        for name in config.status_names():
            state = config.states[name]
            table.add_row(name, state.color, str(state.order))
        Console().print(table)
        for key, value in data["template"].items():
            typer.echo(f"template.{key} = {value}")

    @config_app.command("get")
    def config_get(
        key: str = typer.Argument(..., help="Configuration key (e.g. template.id_prefix)"),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
        json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    ) -> None:
        """Get a configuration value."""
        is_json_output(json_output)  # sync local flag for echo_error
        config = get_config(root)
        try:
            val = get_config_value(config, key)
        except ConfigError as e:
            raise fail(e) from e
        if is_json_output(json_output):
            echo_json({key: val})
        elif isinstance(val, list):
            typer.echo(", ".join(str(i) for i in val))  # type: ignore[reportUnknownArgumentType, reportUnknownVariableType]
        elif isinstance(val, dict):
            echo_json(val)
        else:
            typer.echo(val)

    @config_app.command("set")
    def config_set(
        key: str = typer.Argument(..., help="Configuration key to set"),
        value: str = typer.Argument(..., help="Value to set"),
        root: str = typer.Option(".", "--root", help=ROOT_HELP),
    ) -> None:
        """Set a configuration value and save min-pmt.toml."""
        config = get_config(root)
        try:
            set_config_value(config, key, value)
        except ConfigError as e:
            raise fail(e) from e
        try:
            save_config(Path(root), config)
        except OSError as e:
            raise fail(ConfigError(f"Failed to write config: {e}")) from e
        typer.echo(f"Set {key} = {value}")
