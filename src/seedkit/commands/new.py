"""seedkit new - Create a new project from the template repository."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from seedkit.core.bootstrap import BootstrapState, build_bootstrapper
from seedkit.core.config import ConfigManager
from seedkit.errors import SeedkitError
from seedkit.process import CommandRunner

console = Console()


def prompt_yes_no() -> str:
    """Read one line from stdin; end of input counts as an empty answer."""
    try:
        return console.input()
    except EOFError:
        return ""


@click.command()
@click.argument("path", required=False)
@click.option(
    "--dev",
    is_flag=True,
    help="Clone the development branch from the local workspace",
)
@click.option(
    "--fork",
    default="",
    help="Workspace-relative repo to clone in --dev mode (e.g. github.com/me/fork)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ~/.seedkit/config.json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def new_cmd(path: Optional[str], dev: bool, fork: str, config_path: Optional[Path], verbose: bool):
    """Create a project directory at PATH from the template repository.

    PATH is also used as the new module name. The template is cloned from
    the local workspace, then the local module cache, then the network,
    whichever works first.

    \b
    Examples:
      seedkit new github.com/nilslice/proj
      seedkit new --dev --fork github.com/me/ponzu proj
    """
    if not path:
        console.print("[red]Error:[/] Please provide a project name.")
        console.print("This will create a directory within your pwd.")
        raise SystemExit(1)

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = ConfigManager(config_path).config

    console.print(Panel.fit(
        f"[bold blue]seedkit new[/] - Creating [cyan]{escape(path)}[/]"
        + (" (dev)" if dev else ""),
        border_style="blue"
    ))

    bootstrapper = build_bootstrapper(
        config,
        prompt=prompt_yes_no,
        dev=dev,
        fork=fork or None,
        runner=CommandRunner(),
        console=console,
    )

    try:
        outcome = bootstrapper.run(path)
    except SeedkitError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1)

    if outcome.state == BootstrapState.DONE and not dev:
        console.print(f"\n  cd {escape(path)}")
        console.print("  go build ./...")
