"""CommandAdapter — shared plumbing for the per-program argument builders."""

from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any, ClassVar

from kubemcp.adapters.models import Invocation, StagedFile, ToolOutcome, ToolPlan
from kubemcp.adapters.params import Params
from kubemcp.protocols.mcp.models import ToolDefinition

Builder = Callable[[Params], ToolPlan]


class CommandAdapter:
    """Base class for adapters that drive one command-line program.

    Satisfies the :class:`~kubemcp.protocols.provider.ToolAdapter` protocol.
    Subclasses set ``namespace``, implement :meth:`tool_definitions`, and
    map each tool name to a builder in :meth:`builders`.  Builders are pure
    apart from reading settings: file writes are returned as part of the
    plan and carried out by the dispatcher.
    """

    namespace: ClassVar[str] = ""
    default_program: ClassVar[str] = ""

    def __init__(
        self,
        program: str | None = None,
        *,
        staging_dir: str | Path | None = None,
    ) -> None:
        self.program = program or self.default_program
        self.staging_dir = Path(staging_dir) if staging_dir else Path(tempfile.gettempdir())
        self._builders = self.builders()

    def tool_definitions(self) -> tuple[ToolDefinition, ...]:
        raise NotImplementedError

    def builders(self) -> dict[str, Builder]:
        raise NotImplementedError

    def build(self, name: str, arguments: Any) -> ToolPlan:
        builder = self._builders.get(name)
        if builder is None:
            return ToolOutcome.error(f"Unknown tool: {name}")
        return builder(Params(arguments))

    def invoke(
        self,
        args: list[str],
        *,
        program: str | None = None,
        cwd: str | None = None,
        staged_file: StagedFile | None = None,
    ) -> Invocation:
        return Invocation(
            program=program or self.program,
            args=args,
            cwd=cwd or None,
            staged_file=staged_file,
        )
