"""
env_cmd.py - Build an environment, run the application JSON post processor
and report the resulting layer order.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from appjson_core.environment import StandardEnvironment, StandardServletEnvironment
from appjson_core.errors import PropertySourceError, SettingsError
from appjson_core.origin import origin_of, unwrap
from appjson_core.post_processor import APPLICATION_JSON_PROPERTY_SOURCE_NAME, apply_post_processors
from appjson_core.property_sources import MapPropertySource, SimpleCommandLinePropertySource
from appjson_core.settings import load_settings

from ..util import parse_pairs, to_command_line_args

console = Console()


def _build_environment(
    *,
    web: bool,
    isolated: bool,
    env_pairs: Dict[str, str],
    system_properties: Dict[str, str],
    jndi: Optional[Dict[str, str]],
    args: List[str],
) -> StandardEnvironment:
    system_environment: Dict[str, str] = {} if isolated else dict(os.environ)
    system_environment.update(env_pairs)

    if web:
        environment: StandardEnvironment = StandardServletEnvironment(
            system_properties,
            system_environment,
            jndi_properties=jndi,
        )
    else:
        environment = StandardEnvironment(system_properties, system_environment)

    if args:
        environment.property_sources.add_first(SimpleCommandLinePropertySource(args))
    return environment


def _report(environment: StandardEnvironment, order: int) -> Dict[str, Any]:
    layer = environment.property_sources.get(APPLICATION_JSON_PROPERTY_SOURCE_NAME)
    properties: Dict[str, Any] = {}
    if isinstance(layer, MapPropertySource):
        for key, raw in layer.source.items():
            origin = origin_of(raw)
            properties[key] = {
                "value": unwrap(raw),
                "origin": str(origin) if origin is not None else None,
            }
    return {
        "order": order,
        "property_sources": environment.property_sources.names(),
        "application_json": properties,
    }


def env_command(
    arg: Optional[List[str]] = typer.Option(
        None, "--arg", help="Command line argument as key=value (highest precedence)"
    ),
    prop: Optional[List[str]] = typer.Option(None, "--property", "-D", help="System property as key=value"),
    env: Optional[List[str]] = typer.Option(None, "--env", "-e", help="Extra environment variable as KEY=VALUE"),
    isolated: bool = typer.Option(False, "--isolated", help="Ignore the process environment"),
    web: bool = typer.Option(False, "--web", help="Use a servlet (web) environment"),
    jndi: Optional[List[str]] = typer.Option(None, "--jndi", help="JNDI property as key=value (implies --web)"),
    settings_file: Optional[Path] = typer.Option(
        None,
        "--settings",
        help="TOML file with an [appjson] table",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    output_json: bool = typer.Option(False, "--json", help="Emit JSON instead of tables"),
):
    """Expand spring.application.json into an environment and show the result."""
    try:
        settings = load_settings(settings_file)
    except SettingsError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    jndi_properties = parse_pairs(jndi, "--jndi") if jndi else None
    try:
        environment = _build_environment(
            web=web or jndi_properties is not None,
            isolated=isolated,
            env_pairs=parse_pairs(env, "--env"),
            system_properties=parse_pairs(prop, "--property"),
            jndi=jndi_properties,
            args=to_command_line_args(arg),
        )
    except PropertySourceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    processor = settings.create_post_processor()
    apply_post_processors(environment, [processor])
    report = _report(environment, processor.order)

    if output_json:
        typer.echo(json.dumps(report, indent=2))
        return

    sources = Table(title=f"Property sources (order={report['order']})")
    sources.add_column("#", style="cyan", width=4)
    sources.add_column("Name", style="magenta")
    for index, name in enumerate(report["property_sources"]):
        sources.add_row(str(index), name)
    console.print(sources)

    if not report["application_json"]:
        console.print("[yellow]No spring.application.json properties injected[/yellow]")
        return

    props = Table(title="spring.application.json")
    props.add_column("Key", style="cyan")
    props.add_column("Value", style="white")
    props.add_column("Origin", style="green")
    for key, entry in report["application_json"].items():
        props.add_row(key, json.dumps(entry["value"]), entry["origin"] or "-")
    console.print(props)
