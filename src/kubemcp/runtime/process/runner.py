"""ProcessRunner — spawns external programs and captures their output.

Every run waits for the child to exit; there is no streaming delivery.
A non-zero exit, a timeout, or a failure to spawn at all is reported in
the returned :class:`ProcessResult` rather than raised, so callers can
treat all of them as ordinary tool failures.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Protocol, runtime_checkable

from kubemcp.runtime.process.models import ProcessRequest, ProcessResult
from kubemcp.utils.telemetry import (
    ATTR_PROCESS_ARGC,
    ATTR_PROCESS_EXIT_CODE,
    ATTR_PROCESS_PROGRAM,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


@runtime_checkable
class ProcessRunner(Protocol):
    """Runs a program with an argument vector and captures its output."""

    async def run(self, request: ProcessRequest) -> ProcessResult:
        """Run *request* to completion."""
        ...


class LocalProcessRunner:
    """Runs programs directly on the host with ``asyncio`` subprocesses.

    Satisfies the :class:`ProcessRunner` protocol.  ``env`` is merged over
    the server's own environment so ``PATH`` and ``KUBECONFIG`` carry
    through; per-request values win.
    """

    def __init__(
        self,
        *,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self._env = dict(env or {})
        self._timeout = timeout

    async def run(self, request: ProcessRequest) -> ProcessResult:
        """Spawn the program, wait for it, and return what it printed."""
        timeout = request.timeout if request.timeout is not None else self._timeout
        env = {**os.environ, **self._env, **request.env}

        with _tracer.start_as_current_span("kubemcp.process.run") as span:
            span.set_attribute(ATTR_PROCESS_PROGRAM, request.program)
            span.set_attribute(ATTR_PROCESS_ARGC, len(request.args))
            logger.debug("Running %s %s (cwd=%s)", request.program, request.args, request.cwd)

            try:
                proc = await asyncio.create_subprocess_exec(
                    request.program,
                    *request.args,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=request.cwd,
                    env=env,
                )
            except OSError as exc:
                logger.warning("Failed to start %s: %s", request.program, exc)
                return ProcessResult(stderr=str(exc), spawn_error=str(exc))

            try:
                stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
            except TimeoutError:
                proc.kill()
                await proc.wait()
                logger.warning("%s timed out after %ss", request.program, timeout)
                return ProcessResult(
                    exit_code=proc.returncode,
                    stderr=f"{request.program} timed out after {timeout}s",
                    timed_out=True,
                )

            span.set_attribute(ATTR_PROCESS_EXIT_CODE, proc.returncode or 0)
            if proc.returncode != 0:
                logger.info("%s exited with status %s", request.program, proc.returncode)

            return ProcessResult(
                exit_code=proc.returncode,
                stdout=stdout.decode(errors="replace") if stdout else "",
                stderr=stderr.decode(errors="replace") if stderr else "",
            )
