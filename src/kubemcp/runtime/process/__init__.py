"""Process subsystem — run-to-completion command execution."""

from kubemcp.runtime.process.models import ProcessRequest, ProcessResult
from kubemcp.runtime.process.runner import LocalProcessRunner, ProcessRunner

__all__ = [
    "LocalProcessRunner",
    "ProcessRequest",
    "ProcessResult",
    "ProcessRunner",
]
