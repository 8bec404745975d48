"""Shared CLI output formatters and setup helpers."""

from __future__ import annotations

import logging
import shlex
import sys
from pathlib import Path  # noqa: TC003
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from kubemcp.adapters.models import FileWrite, ToolOutcome, ToolPlan
from kubemcp.protocols.mcp.models import ToolDefinition  # noqa: TC001
from kubemcp.settings import ServerSettings, SettingsError, SettingsLoader

console = Console()
# stdout belongs to the protocol while serving; diagnostics go to stderr.
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route all logging to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def load_settings_or_exit(path: Path | None) -> ServerSettings:
    try:
        return SettingsLoader(path).load()
    except SettingsError as exc:
        err_console.print(f"[red]Settings error:[/red] {escape(str(exc))}")
        sys.exit(1)


def configure_telemetry_or_exit(settings: ServerSettings) -> Any:
    """Enable tracing, or exit 1 when the otel extra is missing."""
    from kubemcp.utils.telemetry import configure_telemetry

    try:
        return configure_telemetry(settings.telemetry, service_name=settings.server.name)
    except ImportError as exc:
        err_console.print(f"[red]Telemetry error:[/red] {escape(str(exc))}")
        sys.exit(1)


def print_tools_table(tools: list[ToolDefinition]) -> None:
    """Pretty-print tool definitions as a table."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Namespace")
    table.add_column("Required")
    table.add_column("Description")

    for tool in tools:
        required = tool.input_schema.get("required", [])
        table.add_row(
            tool.name,
            tool.namespace,
            ", ".join(required) or "-",
            _truncate(tool.description),
        )

    console.print(table)


def describe_plan(plan: ToolPlan) -> str:
    """One-line-per-step description of what a plan would do."""
    if isinstance(plan, ToolOutcome):
        prefix = "error" if plan.is_error else "result"
        return f"{prefix}: {plan.text}"
    if isinstance(plan, FileWrite):
        return f"write {plan.file.path}"

    lines: list[str] = []
    if plan.staged_file is not None:
        lines.append(f"write {plan.staged_file.path}")
    if plan.cwd:
        lines.append(f"cd {shlex.quote(plan.cwd)}")
    lines.append(shlex.join(plan.argv))
    return "\n".join(lines)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
