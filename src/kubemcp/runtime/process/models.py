"""Data models for the process subsystem."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProcessRequest(BaseModel):
    """A program to run to completion."""

    program: str = Field(..., description="Executable name or path.")
    args: list[str] = Field(default_factory=list, description="Argument vector, passed verbatim.")
    cwd: str | None = Field(default=None, description="Working directory for the child.")
    env: dict[str, str] = Field(default_factory=dict, description="Extra env vars for this run.")
    timeout: float | None = Field(default=None, description="Kill the child after this many seconds.")


class ProcessResult(BaseModel):
    """Captured outcome of a finished (or never started) process."""

    exit_code: int | None = Field(default=None, description="Exit status; None if it never ran.")
    stdout: str = Field(default="", description="Captured stdout.")
    stderr: str = Field(default="", description="Captured stderr.")
    timed_out: bool = Field(default=False, description="Whether the run was killed on timeout.")
    spawn_error: str | None = Field(default=None, description="Why the program could not start.")

    @property
    def success(self) -> bool:
        return self.exit_code == 0 and not self.timed_out and self.spawn_error is None
