"""``kubemcp tools`` — inspect and run tools without an MCP client."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click

from kubemcp.cli_commands._output import (
    console,
    describe_plan,
    load_settings_or_exit,
    print_tools_table,
)

_config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="KUBEMCP_CONFIG",
    default=None,
    help="Settings YAML file (also read from KUBEMCP_CONFIG).",
)


@click.group()
def tools() -> None:
    """Inspect and run tools."""


@tools.command("list")
@_config_option
@click.option("--namespace", "-n", default=None, help="Only tools of this namespace.")
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list payload as JSON.")
def list_tools(config_path: Path | None, namespace: str | None, as_json: bool) -> None:
    """List the advertised tools."""
    from kubemcp.app import build_dispatcher

    registry = build_dispatcher(load_settings_or_exit(config_path)).registry
    if namespace is None:
        definitions = list(registry)
    else:
        definitions = list(registry.in_namespace(namespace))

    if as_json:
        console.print_json(json.dumps({"tools": [d.to_wire() for d in definitions]}))
        return

    if not definitions:
        known = ", ".join(registry.namespaces())
        console.print(f"[yellow]No tools found.[/yellow] Known namespaces: {known}")
        return

    print_tools_table(definitions)


@tools.command("call")
@_config_option
@click.argument("name")
@click.option("--args", "-a", "raw_args", default="{}", help="Tool arguments as a JSON object.")
@click.option("--dry-run", is_flag=True, help="Print the command instead of running it.")
def call_tool(config_path: Path | None, name: str, raw_args: str, dry_run: bool) -> None:
    """Run tool NAME once and print its output."""
    from kubemcp.app import build_dispatcher

    arguments = _parse_arguments(raw_args)
    dispatcher = build_dispatcher(load_settings_or_exit(config_path))

    if dry_run:
        click.echo(describe_plan(dispatcher.plan(name, arguments)))
        return

    outcome = asyncio.run(dispatcher.execute(name, arguments))
    click.echo(outcome.text, nl=not outcome.text.endswith("\n"), err=outcome.is_error)
    if outcome.is_error:
        sys.exit(1)


def _parse_arguments(raw: str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--args") from exc
    if not isinstance(data, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")
    return data
