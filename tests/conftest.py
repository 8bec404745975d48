"""Shared fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kubemcp.runtime.process import ProcessRequest, ProcessResult
from kubemcp.settings import ServerSettings

if TYPE_CHECKING:
    from pathlib import Path


class RecordingRunner:
    """ProcessRunner double that records requests and replays one result."""

    def __init__(self, result: ProcessResult | None = None) -> None:
        self.result = result or ProcessResult(exit_code=0, stdout="ok\n")
        self.requests: list[ProcessRequest] = []

    async def run(self, request: ProcessRequest) -> ProcessResult:
        self.requests.append(request)
        return self.result


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def settings(tmp_path: Path) -> ServerSettings:
    return ServerSettings(staging_dir=str(tmp_path / "staging"))
