"""Wiring — builds the adapters, registry, dispatcher, and server from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kubemcp.adapters import HelmAdapter, KubectlAdapter, KustomizeAdapter, ToolRegistry
from kubemcp.protocols.dispatcher import ToolDispatcher
from kubemcp.protocols.mcp.server import MCPServer
from kubemcp.protocols.mcp.transport import open_stdio_transport
from kubemcp.runtime.process import LocalProcessRunner

if TYPE_CHECKING:
    from kubemcp.adapters import CommandAdapter
    from kubemcp.runtime.process import ProcessRunner
    from kubemcp.settings.models import ServerSettings


def build_adapters(settings: ServerSettings) -> tuple[CommandAdapter, ...]:
    """One adapter per namespace, in advertisement order."""
    programs = settings.programs
    return (
        KubectlAdapter(programs.kubectl, staging_dir=settings.staging_dir),
        HelmAdapter(programs.helm, staging_dir=settings.staging_dir),
        KustomizeAdapter(
            programs.kustomize,
            kubectl_program=programs.kubectl,
            staging_dir=settings.staging_dir,
        ),
    )


def build_dispatcher(
    settings: ServerSettings,
    *,
    runner: ProcessRunner | None = None,
) -> ToolDispatcher:
    adapters = build_adapters(settings)
    registry = ToolRegistry.from_adapters(adapters)
    if runner is None:
        runner = LocalProcessRunner(
            env=settings.process.env,
            timeout=settings.process.timeout,
        )
    return ToolDispatcher(registry, adapters, runner)


def build_server(
    settings: ServerSettings,
    *,
    runner: ProcessRunner | None = None,
) -> MCPServer:
    return MCPServer(
        build_dispatcher(settings, runner=runner),
        server_info=settings.server,
        protocol_version=settings.protocol_version,
    )


async def serve_stdio(settings: ServerSettings) -> None:
    """Serve MCP over this process's stdin/stdout until input closes."""
    server = build_server(settings)
    limits = settings.transport
    transport = await open_stdio_transport(
        max_header_bytes=limits.max_header_bytes,
        max_message_bytes=limits.max_message_bytes,
        read_chunk_size=limits.read_chunk_size,
    )
    await server.serve(transport)
