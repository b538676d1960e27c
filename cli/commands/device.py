"""
Device commands: register, show
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from nodecfg.config import ControllerConfig
from nodecfg.core.errors import DeviceStoreError, NodeConfigError
from nodecfg.core.models import DeviceRecord

from ._runtime import EXIT_NOT_FOUND, EXIT_SYSTEMIC, exit_code_for, open_store

app = typer.Typer()
console = Console()


@app.command()
def register(
    device_id: str = typer.Option(..., "--id", help="Device id"),
    org: str = typer.Option(..., "--org", help="Organization the device belongs to"),
    token: str = typer.Option(..., "--token", help="Device registration token"),
    name: str = typer.Option("", "--name", help="Human readable device name"),
    pattern: Optional[str] = typer.Option(None, "--pattern", "-p", help="Pattern name within the organization"),
):
    """
    Record the node's registration.

    Examples:
        nodecfg device register --id node-1 --org e2edev --token s3cret --pattern netspeed
    """
    config = ControllerConfig.from_env()
    try:
        store = open_store(config)
        device = store.save_device(
            DeviceRecord(id=device_id, org=org, token=token, name=name or device_id, pattern=pattern)
        )
    except (NodeConfigError, DeviceStoreError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_SYSTEMIC)

    console.print(f"[green]✓ Registered device {device.org}/{device.id}[/green]")


@app.command()
def show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the registered device.

    Examples:
        nodecfg device show
        nodecfg device show --json
    """
    config = ControllerConfig.from_env()
    try:
        device = open_store(config).find_device()
    except NodeConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(exit_code_for(e))
    except DeviceStoreError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_SYSTEMIC)

    if device is None:
        if json_output:
            print(json.dumps({"error": "device not registered"}))
        else:
            console.print("[yellow]Device not registered[/yellow]")
        raise typer.Exit(EXIT_NOT_FOUND)

    if json_output:
        data = device.to_dict()
        data.pop("token", None)
        print(json.dumps(data, indent=2))
        return

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Device[/bold]", f"{device.org}/{device.id}")
    table.add_row("Name", device.name)
    table.add_row("Pattern", device.pattern or "-")
    table.add_row("State", device.config.state)
    console.print(table)
