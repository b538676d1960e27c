#!/usr/bin/env python3
"""
nodecfg CLI - Node Configuration-State Controller

Main entrypoint for the nodecfg command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import configstate, device
from nodecfg.logging_config import setup_logging

# Initialize Typer app
app = typer.Typer(
    name="nodecfg",
    help="Node configuration-state controller CLI",
    add_completion=False,
)

# Console for rich output
console = Console()

# Add command groups
app.add_typer(device.app, name="device", help="Device registration")
app.add_typer(configstate.app, name="configstate", help="Configuration state operations")


@app.callback()
def _setup():
    setup_logging()


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from nodecfg import __version__ as core_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]nodecfg CLI[/bold]", f"v{__version__}")
    table.add_row("Controller", f"v{core_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
