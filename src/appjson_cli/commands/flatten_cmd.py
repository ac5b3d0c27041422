"""
flatten_cmd.py - Flatten a JSON object into dotted/indexed property keys.
"""

from __future__ import annotations

import json
import sys

import typer
from rich.console import Console
from rich.table import Table

from appjson_core.errors import JsonParseError
from appjson_core.flatten import flatten_values
from appjson_core.json_parser import parse_map

console = Console()


def flatten_command(
    text: str = typer.Argument(..., help="JSON object to flatten, or '-' to read stdin"),
    output_json: bool = typer.Option(False, "--json", help="Emit a JSON object instead of a table"),
):
    """Flatten a JSON object the way spring.application.json is expanded."""
    raw = sys.stdin.read() if text == "-" else text
    try:
        data = parse_map(raw)
    except JsonParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    flattened = flatten_values(data)

    if output_json:
        typer.echo(json.dumps(flattened, indent=2))
        return

    if not flattened:
        console.print("[yellow]No properties (empty object)[/yellow]")
        return

    table = Table(title="Flattened properties")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")
    for key, value in flattened.items():
        table.add_row(key, json.dumps(value))
    console.print(table)
