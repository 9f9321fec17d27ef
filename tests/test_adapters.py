"""
Tests for runners — mock, subprocess, and shell-script interpreter selection.
"""

import shutil
import sys
from pathlib import Path

import pytest

from forge_ci.adapters.mock import MockRunner
from forge_ci.adapters.shell.command import SubprocessRunner
from forge_ci.adapters.shell.script import (
    BASH_NOT_FOUND,
    WINDOWS_BASH_CANDIDATES,
    ScriptRunner,
    interpreter_candidates,
)
from forge_ci.core.models.result import ExecutionResult

PY = sys.executable

# ── Mock Runner Tests ────────────────────────────────────────────────


class TestMockRunner:
    def test_default_success(self):
        mock = MockRunner()
        result = mock.run(["forge", "deploy"])
        assert result.ok
        assert result.command == ["forge", "deploy"]
        assert mock.call_count == 1

    def test_default_stdout_only_when_captured(self):
        mock = MockRunner(default_stdout="1.2.3")
        assert mock.run(["forge", "--version"], capture=True).stdout == "1.2.3"
        assert mock.run(["forge", "--version"]).stdout == ""

    def test_prefix_response(self):
        mock = MockRunner()
        mock.set_failure(("forge", "deploy"), error="nope", returncode=2)
        result = mock.run(["forge", "deploy", "-e", "staging"])
        assert not result.ok
        assert result.returncode == 2
        assert result.command == ["forge", "deploy", "-e", "staging"]
        assert mock.run(["forge", "install"]).ok

    def test_latest_response_wins(self):
        mock = MockRunner()
        mock.set_failure(("forge",))
        mock.set_response(("forge", "lint"), ExecutionResult.success(["forge", "lint"]))
        assert mock.run(["forge", "lint"]).ok
        assert not mock.run(["forge", "deploy"]).ok

    def test_missing_program(self):
        mock = MockRunner(missing={"bash"})
        result = mock.run(["bash", "-lc", "true"])
        assert result.spawn_failed
        assert mock.run(["forge", "--version"]).ok

    def test_reset(self):
        mock = MockRunner()
        mock.set_failure(("forge",))
        mock.run(["forge"])
        mock.reset()
        assert mock.call_count == 0
        assert mock.run(["forge"]).ok


# ── Subprocess Runner Tests ──────────────────────────────────────────


class TestSubprocessRunner:
    def test_name(self):
        assert SubprocessRunner().name == "subprocess"

    def test_success(self, tmp_path: Path):
        result = SubprocessRunner().run([PY, "-c", "pass"], cwd=tmp_path)
        assert result.ok
        assert result.returncode == 0

    def test_capture(self, tmp_path: Path):
        result = SubprocessRunner().run(
            [PY, "-c", "import sys; print('out'); print('err', file=sys.stderr)"],
            cwd=tmp_path,
            capture=True,
        )
        assert result.ok
        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"

    def test_non_zero_exit(self, tmp_path: Path):
        result = SubprocessRunner().run([PY, "-c", "raise SystemExit(3)"], cwd=tmp_path)
        assert not result.ok
        assert not result.spawn_failed
        assert result.returncode == 3
        assert "Command failed (3)" in result.error
        assert result.error.endswith(f"{PY} -c raise SystemExit(3)")

    def test_arguments_are_not_shell_parsed(self, tmp_path: Path):
        tricky = "a b; echo $HOME 'q'"
        result = SubprocessRunner().run(
            [PY, "-c", "import sys; print(sys.argv[1])", tricky],
            cwd=tmp_path,
            capture=True,
        )
        assert result.stdout.rstrip("\r\n") == tricky

    def test_cwd(self, tmp_path: Path):
        result = SubprocessRunner().run(
            [PY, "-c", "import os; print(os.getcwd())"],
            cwd=tmp_path,
            capture=True,
        )
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_env_overrides(self, tmp_path: Path):
        result = SubprocessRunner().run(
            [PY, "-c", "import os; print(os.environ['FORGE_CI_TEST_VAR'])"],
            cwd=tmp_path,
            env={"FORGE_CI_TEST_VAR": "hello"},
            capture=True,
        )
        assert result.stdout.strip() == "hello"

    def test_executable_not_found(self, tmp_path: Path):
        result = SubprocessRunner().run(["definitely-not-a-real-program-xyz"], cwd=tmp_path)
        assert not result.ok
        assert result.spawn_failed
        assert "ENOENT" in result.error

    def test_empty_command(self):
        result = SubprocessRunner().run([])
        assert not result.ok
        assert not result.spawn_failed

    @pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX signals")
    def test_signal_termination(self, tmp_path: Path):
        result = SubprocessRunner().run(
            [PY, "-c", "import os, signal; os.kill(os.getpid(), signal.SIGTERM)"],
            cwd=tmp_path,
        )
        assert not result.ok
        assert result.returncode < 0
        assert "signal" in result.error


# ── Interpreter selection ────────────────────────────────────────────


class TestInterpreterCandidates:
    @pytest.mark.parametrize("shell", ["pwsh", "PowerShell", " powershell "])
    def test_powershell(self, shell):
        assert interpreter_candidates(shell, "linux") == [
            ["pwsh", "-NoLogo", "-NoProfile", "-NonInteractive", "-Command"]
        ]

    def test_bash_on_posix(self):
        assert interpreter_candidates("bash", "linux") == [["bash", "-lc"]]
        assert interpreter_candidates("bash", "darwin") == [["bash", "-lc"]]

    def test_bash_on_windows(self):
        candidates = interpreter_candidates("bash", "win32")
        assert [c[0] for c in candidates] == list(WINDOWS_BASH_CANDIDATES)
        assert candidates[-1] == ["bash", "-lc"]

    def test_unknown_shell_falls_back_to_bash(self):
        assert interpreter_candidates("zsh", "linux") == [["bash", "-lc"]]
        assert interpreter_candidates("", "linux") == [["bash", "-lc"]]


# ── Script runner ────────────────────────────────────────────────────


class TestScriptRunner:
    def test_blank_script_is_noop(self):
        mock = MockRunner()
        result = ScriptRunner(mock, platform="linux").run_script("  \n\t ", "bash")
        assert result.ok
        assert mock.call_count == 0

    def test_posix_bash(self, tmp_path: Path):
        mock = MockRunner()
        result = ScriptRunner(mock, platform="linux").run_script("\necho hi\n", "bash", tmp_path)
        assert result.ok
        assert mock.commands == [["bash", "-lc", "echo hi"]]
        assert mock.call_log[0].cwd == tmp_path

    def test_windows_falls_through_missing_candidates(self):
        mock = MockRunner(missing=set(WINDOWS_BASH_CANDIDATES[:2]))
        result = ScriptRunner(mock, platform="win32").run_script("echo hi", "bash")
        assert result.ok
        assert [c[0] for c in mock.commands] == list(WINDOWS_BASH_CANDIDATES)

    def test_windows_first_candidate_found(self):
        mock = MockRunner()
        ScriptRunner(mock, platform="win32").run_script("echo hi", "bash")
        assert mock.commands == [[WINDOWS_BASH_CANDIDATES[0], "-lc", "echo hi"]]

    def test_windows_script_failure_stops_search(self):
        mock = MockRunner()
        mock.set_failure((WINDOWS_BASH_CANDIDATES[0],), error="exit 1")
        result = ScriptRunner(mock, platform="win32").run_script("exit 1", "bash")
        assert not result.ok
        assert not result.spawn_failed
        assert mock.call_count == 1

    def test_windows_no_bash_anywhere(self):
        mock = MockRunner(missing=set(WINDOWS_BASH_CANDIDATES))
        result = ScriptRunner(mock, platform="win32").run_script("echo hi", "bash")
        assert not result.ok
        assert result.error == BASH_NOT_FOUND
        assert mock.call_count == len(WINDOWS_BASH_CANDIDATES)

    def test_pwsh(self):
        mock = MockRunner()
        ScriptRunner(mock, platform="win32").run_script("Write-Host hi", "pwsh")
        assert mock.commands == [
            ["pwsh", "-NoLogo", "-NoProfile", "-NonInteractive", "-Command", "Write-Host hi"]
        ]

    def test_pwsh_missing(self):
        mock = MockRunner(missing={"pwsh"})
        result = ScriptRunner(mock, platform="linux").run_script("Write-Host hi", "pwsh")
        assert not result.ok
        assert "pwsh was not found" in result.error

    @pytest.mark.skipif(shutil.which("bash") is None, reason="bash not installed")
    def test_real_bash(self, tmp_path: Path):
        runner = ScriptRunner(SubprocessRunner())
        ok = runner.run_script("touch marker\n", "bash", tmp_path)
        assert ok.ok
        assert (tmp_path / "marker").exists()

        failed = runner.run_script("exit 4", "bash", tmp_path)
        assert failed.returncode == 4
        assert not failed.spawn_failed
