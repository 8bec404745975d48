"""Helpers for declaring advertised input schemas.

The schemas are metadata for clients; arguments are never validated
against them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from kubemcp.protocols.mcp.models import ToolDefinition


def string(description: str, *, enum: Sequence[str] | None = None) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "string"}
    if enum is not None:
        prop["enum"] = list(enum)
    prop["description"] = description
    return prop


def boolean(description: str) -> dict[str, Any]:
    return {"type": "boolean", "description": description}


def integer(description: str) -> dict[str, Any]:
    return {"type": "integer", "description": description}


def obj(description: str) -> dict[str, Any]:
    return {"type": "object", "description": description}


def string_array(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def tool(
    namespace: str,
    name: str,
    description: str,
    properties: dict[str, dict[str, Any]] | None = None,
    required: Sequence[str] = (),
) -> ToolDefinition:
    """Build a :class:`ToolDefinition` with an object-typed input schema."""
    schema: dict[str, Any] = {"type": "object", "properties": dict(properties or {})}
    if required:
        schema["required"] = list(required)
    return ToolDefinition(
        name=name,
        description=description,
        input_schema=schema,
        namespace=namespace,
    )
