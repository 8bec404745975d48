"""``kubemcp serve`` — run the MCP server on stdin/stdout."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from kubemcp.cli_commands._output import (
    configure_logging,
    configure_telemetry_or_exit,
    load_settings_or_exit,
)
from kubemcp.protocols.errors import FramingError

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="KUBEMCP_CONFIG",
    default=None,
    help="Settings YAML file (also read from KUBEMCP_CONFIG).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing.")
def serve(config_path: Path | None, log_level: str | None, telemetry: bool) -> None:
    """Serve kubectl, helm, and kustomize tools over MCP stdio."""
    from kubemcp.app import serve_stdio

    settings = load_settings_or_exit(config_path)
    configure_logging(log_level or settings.log_level)

    provider = None
    if telemetry or settings.telemetry.enabled:
        provider = configure_telemetry_or_exit(settings)

    try:
        asyncio.run(serve_stdio(settings))
    except FramingError as exc:
        logger.error("Input stream is not valid MCP framing: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        if provider is not None:
            provider.shutdown()
