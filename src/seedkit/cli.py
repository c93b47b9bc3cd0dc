"""Main CLI entry point for seedkit."""

import click

from seedkit import __version__
from seedkit.commands.config import config as config_group
from seedkit.commands.new import new_cmd


@click.group()
@click.version_option(version=__version__, prog_name="seedkit")
def main():
    """seedkit - Bootstrap new projects from a template repository.

    \b
    Quick Start:
      seedkit new github.com/me/site     Create a project at ./github.com/me/site
      seedkit new --dev site             Clone the development branch locally

    \b
    Configuration:
      seedkit config show                Show effective configuration
      seedkit config init                Write default ~/.seedkit/config.json
      seedkit config set KEY VALUE       Change one setting
    """
    pass


main.add_command(new_cmd, name="new")
main.add_command(config_group, name="config")


if __name__ == "__main__":
    main()
