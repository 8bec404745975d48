"""kubemcp CLI entrypoint."""

from __future__ import annotations

import click

from kubemcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="kubemcp")
def main() -> None:
    """kubemcp — MCP server for kubectl, helm, and kustomize."""


# Register subcommands
from kubemcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
