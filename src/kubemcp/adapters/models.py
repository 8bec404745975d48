"""Data models shared by the argument builders."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ToolOutcome(BaseModel):
    """Result of one tool call: captured text plus a failure flag.

    The text is relayed verbatim; nothing downstream parses it.
    """

    text: str = ""
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> ToolOutcome:
        return cls(text=text)

    @classmethod
    def error(cls, text: str) -> ToolOutcome:
        return cls(text=text, is_error=True)


class StagedFile(BaseModel):
    """Text written to disk before a program runs."""

    path: str
    content: str


class Invocation(BaseModel):
    """A program run built from tool arguments."""

    program: str = Field(..., description="Executable to spawn.")
    args: list[str] = Field(default_factory=list, description="Argument vector, order-significant.")
    cwd: str | None = Field(default=None, description="Working directory, if not inherited.")
    staged_file: StagedFile | None = Field(
        default=None, description="File to write before spawning."
    )

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]


class FileWrite(BaseModel):
    """A staging-only plan: write a file and report, without running anything."""

    file: StagedFile
    message: str


ToolPlan = Invocation | FileWrite | ToolOutcome
