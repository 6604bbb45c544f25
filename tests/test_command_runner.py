from __future__ import annotations

import os
import sys

import pytest

from _review_action.command_runner import COMMAND_NOT_FOUND, check_exec, run_command
from _review_action.errors import CommandFailedError


def _python(code: str) -> list[str]:
    return ["-c", code]


def test_run_command_captures_output(capsys: pytest.CaptureFixture[str]) -> None:
    result = run_command(sys.executable, _python("print('one'); print(); print('two')"))

    assert result.returncode == 0
    assert result.lines == ["one", "two"]
    assert "one" in capsys.readouterr().out


def test_run_command_uses_working_directory(tmp_path) -> None:
    result = run_command(sys.executable, _python("import os; print(os.getcwd())"), chdir=str(tmp_path))

    assert result.lines == [os.path.realpath(tmp_path)]


def test_check_exec_returns_exit_code_without_error_message() -> None:
    assert check_exec(sys.executable, _python("raise SystemExit(1)")) == 1


def test_check_exec_raises_with_error_message() -> None:
    with pytest.raises(CommandFailedError) as excinfo:
        check_exec(sys.executable, _python("raise SystemExit(3)"), error="Unable to compile")

    assert str(excinfo.value) == "Unable to compile (3)."
    assert excinfo.value.returncode == 3


def test_check_exec_logs_title(capsys: pytest.CaptureFixture[str]) -> None:
    check_exec(sys.executable, _python("pass"), title="Checking python")

    assert "Checking python..." in capsys.readouterr().out


def test_missing_executable_is_command_not_found() -> None:
    result = run_command("definitely-not-a-real-command-xyz")

    assert result.returncode == COMMAND_NOT_FOUND
    with pytest.raises(CommandFailedError, match=r"\(127\)"):
        check_exec("definitely-not-a-real-command-xyz", error="Unable to run it")
