"""seedkit config - Inspect and edit seedkit configuration."""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from seedkit.core.config import ConfigError, ConfigManager

console = Console()

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ~/.seedkit/config.json)",
)


@click.group()
def config():
    """Inspect and edit seedkit configuration."""
    pass


@config.command("show")
@_config_option
def show_cmd(config_path: Optional[Path]):
    """Show the effective configuration."""
    manager = ConfigManager(config_path)

    table = Table(title=escape(str(manager.path)))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in manager.config.to_dict().items():
        table.add_row(key, escape(json.dumps(value)))

    console.print(table)


@config.command("init")
@_config_option
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_cmd(config_path: Optional[Path], force: bool):
    """Write the default configuration file."""
    manager = ConfigManager(config_path)
    if manager.path.exists() and not force:
        console.print(f"[yellow]Config already exists:[/] {escape(str(manager.path))}")
        console.print("Use --force to overwrite.")
        raise SystemExit(1)

    manager.save()
    console.print(f"[green]✓[/] Wrote {escape(str(manager.path))}")


@config.command("set")
@_config_option
@click.argument("key")
@click.argument("value")
def set_cmd(config_path: Optional[Path], key: str, value: str):
    """Set KEY to VALUE (parsed as JSON when possible)."""
    manager = ConfigManager(config_path)
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value

    try:
        manager.update(**{key: parsed})
    except KeyError:
        console.print(f"[red]Error:[/] Unknown config key '{escape(key)}'")
        raise SystemExit(1)
    except ConfigError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1)

    console.print(f"[green]✓[/] {escape(key)} = {escape(json.dumps(parsed))}")
