"""
Configstate commands: show, set
"""

import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from nodecfg.config import ControllerConfig
from nodecfg.controller import find_configstate_for_output, update_configstate
from nodecfg.core.errors import NodeConfigError
from nodecfg.metrics import init_metrics, write_metrics_textfile

from ._runtime import (
    build_provisioner,
    exit_code_for,
    open_registry,
    open_store,
    parse_attributes,
)

app = typer.Typer()
console = Console()


def _fail(err: Exception, json_output: bool, code: int) -> None:
    if json_output:
        print(json.dumps({"error": str(err), "type": type(err).__name__}))
    else:
        console.print(f"[red]Error:[/red] {err}")
    raise typer.Exit(code)


@app.command()
def show(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the node's configuration state.

    Examples:
        nodecfg configstate show
        nodecfg configstate show --json
    """
    config = ControllerConfig.from_env()
    try:
        state = find_configstate_for_output(open_store(config))
    except NodeConfigError as e:
        _fail(e, json_output, exit_code_for(e))

    if json_output:
        print(json.dumps(state.to_dict(), indent=2))
    else:
        console.print(f"Configuration state: [cyan]{state.state}[/cyan]")


@app.command("set")
def set_state(
    state: str = typer.Argument(..., help="Target state (configuring or configured)"),
    attrs: Optional[List[str]] = typer.Option(
        None, "--attr", "-a", help="Service user input value as name=value (repeatable)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Change the node's configuration state.

    Moving to configured resolves the node's pattern and provisions every
    dependency that is not yet present.

    Examples:
        nodecfg configstate set configured
        nodecfg configstate set configured --attr HZN_LAT=52.1 --attr HZN_LON=4.3
    """
    config = ControllerConfig.from_env()
    attributes = parse_attributes(attrs)
    if config.metrics_textfile:
        init_metrics()

    try:
        store = open_store(config)
        registry = open_registry(config)
        provisioner = build_provisioner(config, store, registry, attributes)
        result = update_configstate(state, store, registry, provisioner, config.arch)
    except NodeConfigError as e:
        write_metrics_textfile(config.metrics_textfile)
        _fail(e, json_output, exit_code_for(e))

    write_metrics_textfile(config.metrics_textfile)

    if json_output:
        output = {
            "configstate": result.config.to_dict(),
            "policies_created": [n.to_dict() for n in result.notifications],
        }
        print(json.dumps(output, indent=2))
        return

    console.print(f"Configuration state: [cyan]{result.config.state}[/cyan]")
    if result.notifications:
        table = Table(title="Services Provisioned")
        table.add_column("Service", style="green")
        table.add_column("Org", style="yellow")
        table.add_column("Version", style="cyan")
        for n in result.notifications:
            table.add_row(n.aggregate_id, n.payload.get("org", ""), n.payload.get("version", ""))
        console.print(table)
