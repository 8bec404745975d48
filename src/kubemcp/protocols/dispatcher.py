"""ToolDispatcher — routes tool calls to the adapter that owns their namespace."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kubemcp.adapters.models import FileWrite, StagedFile, ToolOutcome, ToolPlan
from kubemcp.runtime.process import ProcessRequest
from kubemcp.utils.telemetry import (
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    ATTR_TOOL_NAMESPACE,
    get_tracer,
)

if TYPE_CHECKING:
    from kubemcp.adapters.registry import ToolRegistry
    from kubemcp.protocols.mcp.models import ToolDefinition
    from kubemcp.protocols.provider import ToolAdapter
    from kubemcp.runtime.process import ProcessRunner

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


class ToolDispatcher:
    """Maintains a namespace-to-adapter map and carries out tool calls.

    A tool name is resolved through the registry to its definition, and the
    definition's namespace selects the adapter by exact match.

    Usage::

        dispatcher = ToolDispatcher(registry, [kubectl, helm], LocalProcessRunner())
        outcome = await dispatcher.execute("helm_list", {"allNamespaces": True})
    """

    def __init__(
        self,
        registry: ToolRegistry,
        adapters: Iterable[ToolAdapter],
        runner: ProcessRunner,
    ) -> None:
        self._registry = registry
        self._runner = runner
        self._adapters: dict[str, ToolAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def register(self, adapter: ToolAdapter) -> None:
        """Add *adapter* to the routing table under its namespace."""
        if adapter.namespace in self._adapters:
            msg = f"Namespace already registered: {adapter.namespace}"
            raise ValueError(msg)
        self._adapters[adapter.namespace] = adapter

    def all_tools(self) -> list[ToolDefinition]:
        """Return every advertised tool in registration order."""
        return list(self._registry)

    def resolve(self, name: str) -> ToolAdapter | None:
        """Return the adapter serving *name*, or ``None`` if nothing does."""
        definition = self._registry.get(name)
        if definition is None:
            return None
        return self._adapters.get(definition.namespace)

    def plan(self, name: str, arguments: Any) -> ToolPlan:
        """Build the plan for one call without carrying it out."""
        adapter = self.resolve(name)
        if adapter is None:
            return ToolOutcome.error(f"Unknown tool: {name}")
        return adapter.build(name, arguments)

    async def execute(self, name: str, arguments: Any) -> ToolOutcome:
        """Plan and carry out one tool call."""
        with _tracer.start_as_current_span("kubemcp.tools.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            definition = self._registry.get(name)
            if definition is not None:
                span.set_attribute(ATTR_TOOL_NAMESPACE, definition.namespace)

            outcome = await self.carry_out(self.plan(name, arguments))

            span.set_attribute(ATTR_TOOL_IS_ERROR, outcome.is_error)
            return outcome

    async def carry_out(self, plan: ToolPlan) -> ToolOutcome:
        """Stage files and run the process a plan calls for."""
        if isinstance(plan, ToolOutcome):
            return plan

        if isinstance(plan, FileWrite):
            failure = _write_staged(plan.file)
            return failure or ToolOutcome.ok(plan.message)

        if plan.staged_file is not None:
            failure = _write_staged(plan.staged_file)
            if failure is not None:
                return failure

        result = await self._runner.run(
            ProcessRequest(program=plan.program, args=plan.args, cwd=plan.cwd)
        )
        if result.success:
            return ToolOutcome.ok(result.stdout)
        return ToolOutcome.error(result.stderr)


def _write_staged(staged: StagedFile) -> ToolOutcome | None:
    """Write *staged* to disk; return an error outcome if that fails.

    Not transactional, and shared default paths are not locked.
    """
    path = Path(staged.path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(staged.content, encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to stage %s: %s", path, exc)
        return ToolOutcome.error(f"Failed to write {path}: {exc}")
    logger.debug("Staged %d bytes to %s", len(staged.content), path)
    return None
