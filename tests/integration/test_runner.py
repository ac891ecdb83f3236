"""Integration tests for child process execution."""

import sys
import threading

import pytest

from cwtui.cli.tui.tasks import CancelToken
from cwtui.errors import CommandError, CommandNotFoundError, TaskCancelled
from cwtui.runner import EXIT_COMMAND_NOT_FOUND, CommandRunner

pytestmark = pytest.mark.integration

MISSING = "cwtui-definitely-not-installed"


def _python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


class TestCapture:
    """Tests for CommandRunner.capture."""

    def test_returns_stdout(self):
        assert CommandRunner().capture(_python("print('hello')")) == "hello\n"

    def test_nonzero_exit_raises_with_stderr(self):
        with pytest.raises(CommandError) as excinfo:
            CommandRunner().capture(_python("import sys; sys.stderr.write('broken'); sys.exit(3)"))
        assert excinfo.value.returncode == 3
        assert excinfo.value.stderr == "broken"
        assert "failed: broken" in str(excinfo.value)

    def test_missing_program(self):
        with pytest.raises(CommandNotFoundError, match="command not found"):
            CommandRunner().capture([MISSING])

    def test_cancelled_before_start(self):
        token = CancelToken()
        token.cancel()
        with pytest.raises(TaskCancelled):
            CommandRunner().capture(_python("print('never')"), cancel=token)

    def test_cancel_terminates_running_child(self):
        token = CancelToken()
        runner = CommandRunner()
        code = "import sys, time; sys.stdout.write('ready'); sys.stdout.flush(); time.sleep(30)"

        timer = threading.Timer(0.5, token.cancel)
        timer.start()
        try:
            with pytest.raises(TaskCancelled):
                runner.capture(_python(code), cancel=token)
        finally:
            timer.cancel()

    def test_token_is_detached_after_run(self):
        token = CancelToken()
        CommandRunner().capture(_python("pass"), cancel=token)
        token.cancel()
        assert token.cancelled


class TestRunToTerminal:
    """Tests for CommandRunner.run_to_terminal and argv builders."""

    def test_returns_exit_code(self):
        assert CommandRunner().run_to_terminal(_python("import sys; sys.exit(4)")) == 4

    def test_missing_program(self, capsys):
        assert CommandRunner().run_to_terminal([MISSING]) == EXIT_COMMAND_NOT_FOUND
        assert f"cwtui error: {MISSING}: command not found" in capsys.readouterr().err

    def test_argv_builders(self):
        runner = CommandRunner("cw")
        assert runner.backend_argv("mcp", ["list"]) == ["cw", "mcp", "list"]
        assert runner.self_argv("sandbox", ("/p", "b")) == [sys.executable, "-m", "cwtui", "sandbox", "/p", "b"]
