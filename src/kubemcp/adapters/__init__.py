"""Command adapters — per-program tool tables and argument builders."""

from kubemcp.adapters.base import CommandAdapter
from kubemcp.adapters.helm import HelmAdapter
from kubemcp.adapters.kubectl import KubectlAdapter
from kubemcp.adapters.kustomize import KustomizeAdapter
from kubemcp.adapters.models import FileWrite, Invocation, StagedFile, ToolOutcome, ToolPlan
from kubemcp.adapters.params import Params
from kubemcp.adapters.registry import DuplicateToolError, ToolRegistry

__all__ = [
    "CommandAdapter",
    "DuplicateToolError",
    "FileWrite",
    "HelmAdapter",
    "Invocation",
    "KubectlAdapter",
    "KustomizeAdapter",
    "Params",
    "StagedFile",
    "ToolOutcome",
    "ToolPlan",
    "ToolRegistry",
]
