"""Pydantic models for the server settings file consumed by ``kubemcp serve``."""

from __future__ import annotations

import tempfile
from typing import Literal

from pydantic import BaseModel, Field

from kubemcp import __version__


class ServerInfo(BaseModel):
    """Identity reported in the ``initialize`` response."""

    name: str = "kubemcp"
    version: str = __version__
    description: str = "Kubernetes orchestration MCP server (kubectl, helm, kustomize)"


class ProgramSettings(BaseModel):
    """Executable names (or absolute paths) for each adapter."""

    kubectl: str = "kubectl"
    helm: str = "helm"
    kustomize: str = "kustomize"


class ProcessSettings(BaseModel):
    """How external programs are run."""

    timeout: float | None = Field(
        default=None,
        description="Kill a tool process after this many seconds; None waits forever.",
    )
    env: dict[str, str] = Field(default_factory=dict, description="Extra env vars for every run.")


class TransportSettings(BaseModel):
    """Framing limits for the stdio transport."""

    max_header_bytes: int = Field(default=8192, gt=0)
    max_message_bytes: int = Field(default=64 * 1024 * 1024, gt=0)
    read_chunk_size: int = Field(default=65536, gt=0)


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerSettings(BaseModel):
    """Top-level settings, all optional."""

    server: ServerInfo = Field(default_factory=ServerInfo)
    protocol_version: str = "2024-11-05"
    programs: ProgramSettings = Field(default_factory=ProgramSettings)
    process: ProcessSettings = Field(default_factory=ProcessSettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    staging_dir: str = Field(
        default_factory=tempfile.gettempdir,
        description="Directory for manifests staged before kubectl/kustomize runs.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
