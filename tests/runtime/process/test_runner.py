"""Tests for LocalProcessRunner against real host programs."""

import sys
from pathlib import Path

import pytest

from kubemcp.runtime.process import LocalProcessRunner, ProcessRequest, ProcessResult, ProcessRunner

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX sh")


class TestProcessResult:
    def test_success(self) -> None:
        assert ProcessResult(exit_code=0).success

    @pytest.mark.parametrize(
        "result",
        [
            ProcessResult(exit_code=1),
            ProcessResult(),
            ProcessResult(exit_code=0, timed_out=True),
            ProcessResult(exit_code=0, spawn_error="x"),
        ],
    )
    def test_failures(self, result: ProcessResult) -> None:
        assert not result.success


class TestLocalProcessRunner:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(LocalProcessRunner(), ProcessRunner)

    async def test_captures_stdout(self) -> None:
        result = await LocalProcessRunner().run(ProcessRequest(program="echo", args=["hello"]))
        assert result.success
        assert result.exit_code == 0
        assert result.stdout == "hello\n"

    async def test_arguments_are_not_shell_interpreted(self) -> None:
        result = await LocalProcessRunner().run(
            ProcessRequest(program="echo", args=["$HOME", "a;b"])
        )
        assert result.stdout == "$HOME a;b\n"

    async def test_nonzero_exit_captures_stderr(self) -> None:
        result = await LocalProcessRunner().run(
            ProcessRequest(program="sh", args=["-c", "echo out; echo err >&2; exit 3"])
        )
        assert not result.success
        assert result.exit_code == 3
        assert result.stdout == "out\n"
        assert result.stderr == "err\n"

    async def test_missing_program(self) -> None:
        result = await LocalProcessRunner().run(
            ProcessRequest(program="definitely-not-a-real-binary-kubemcp")
        )
        assert not result.success
        assert result.exit_code is None
        assert result.spawn_error
        assert result.stderr == result.spawn_error

    async def test_timeout_kills_process(self) -> None:
        result = await LocalProcessRunner(timeout=0.2).run(
            ProcessRequest(program="sleep", args=["5"])
        )
        assert result.timed_out
        assert not result.success
        assert "timed out" in result.stderr

    async def test_request_timeout_overrides_default(self) -> None:
        result = await LocalProcessRunner(timeout=30).run(
            ProcessRequest(program="sleep", args=["5"], timeout=0.2)
        )
        assert result.timed_out

    async def test_cwd(self, tmp_path: Path) -> None:
        result = await LocalProcessRunner().run(ProcessRequest(program="pwd", cwd=str(tmp_path)))
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    async def test_env_layers(self) -> None:
        runner = LocalProcessRunner(env={"KUBEMCP_A": "settings", "KUBEMCP_B": "settings"})
        result = await runner.run(
            ProcessRequest(
                program="sh",
                args=["-c", 'echo "$KUBEMCP_A $KUBEMCP_B"'],
                env={"KUBEMCP_B": "request"},
            )
        )
        assert result.stdout == "settings request\n"

    async def test_inherits_path(self) -> None:
        result = await LocalProcessRunner(env={"KUBEMCP_X": "1"}).run(
            ProcessRequest(program="sh", args=["-c", "echo $PATH"])
        )
        assert result.stdout.strip()
