"""ToolRegistry — the immutable, ordered tool catalog."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kubemcp.protocols.mcp.models import ToolDefinition
    from kubemcp.protocols.provider import ToolAdapter


class DuplicateToolError(ValueError):
    """Two definitions share a tool name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Duplicate tool name: {name}")


class ToolRegistry:
    """Name-to-definition catalog, built once and never mutated.

    Iteration yields definitions in registration order, which is also the
    order ``tools/list`` advertises them in.

    Usage::

        registry = ToolRegistry.from_adapters([KubectlAdapter(), HelmAdapter()])
        registry.get("helm_list").namespace   # "helm"
    """

    def __init__(self, definitions: Iterable[ToolDefinition]) -> None:
        tools: dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in tools:
                raise DuplicateToolError(definition.name)
            tools[definition.name] = definition
        self._tools = MappingProxyType(tools)

    @classmethod
    def from_adapters(cls, adapters: Iterable[ToolAdapter]) -> ToolRegistry:
        """Collect every adapter's definitions, adapter by adapter."""
        return cls(d for adapter in adapters for d in adapter.tool_definitions())

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def namespaces(self) -> tuple[str, ...]:
        """Distinct namespaces, in order of first registration."""
        return tuple(dict.fromkeys(d.namespace for d in self._tools.values()))

    def in_namespace(self, namespace: str) -> tuple[ToolDefinition, ...]:
        return tuple(d for d in self._tools.values() if d.namespace == namespace)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolDefinition]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
