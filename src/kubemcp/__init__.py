"""kubemcp — MCP gateway for kubectl, helm, and kustomize."""

from __future__ import annotations

__version__ = "1.0.0"
