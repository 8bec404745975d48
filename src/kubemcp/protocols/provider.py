"""ToolAdapter protocol — the common interface for every command adapter.

Each adapter (kubectl, helm, kustomize) satisfies this protocol so that the
:class:`~kubemcp.protocols.dispatcher.ToolDispatcher` can route tool calls
by namespace without knowing which program sits behind them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kubemcp.adapters.models import ToolPlan
    from kubemcp.protocols.mcp.models import ToolDefinition


@runtime_checkable
class ToolAdapter(Protocol):
    """Advertises a namespace of tools and plans their invocations."""

    @property
    def namespace(self) -> str:
        """Routing key shared by every tool this adapter serves."""
        ...

    def tool_definitions(self) -> tuple[ToolDefinition, ...]:
        """Return this adapter's tools in advertisement order."""
        ...

    def build(self, name: str, arguments: Any) -> ToolPlan:
        """Translate *arguments* for tool *name* into a plan.

        The plan is an :class:`~kubemcp.adapters.models.Invocation` to run,
        a :class:`~kubemcp.adapters.models.FileWrite` to stage, or a
        ready :class:`~kubemcp.adapters.models.ToolOutcome`.
        """
        ...
