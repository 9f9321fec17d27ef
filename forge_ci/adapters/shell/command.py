"""
Subprocess runner — the single place processes are spawned.

Commands are always passed to ``subprocess.run`` as a vector with
``shell=False``: an argument containing spaces or shell metacharacters
reaches the program unchanged.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Mapping
from pathlib import Path

from forge_ci.adapters.base import Runner
from forge_ci.core.models.result import ExecutionResult

logger = logging.getLogger(__name__)


class SubprocessRunner(Runner):
    """Run real processes.

    Without ``capture`` the child inherits stdout/stderr so its output
    streams live into the CI log. With ``capture`` both streams are
    collected as text.
    """

    @property
    def name(self) -> str:
        return "subprocess"

    def run(
        self,
        command: list[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = False,
    ) -> ExecutionResult:
        if not command:
            return ExecutionResult.failure(command=[], error="Empty command")

        # Resolve through PATH/PATHEXT so Windows shims (npm.cmd) are found
        program = command[0]
        resolved = shutil.which(program) or program
        argv = [resolved, *command[1:]]

        full_env = os.environ.copy()
        if env:
            full_env.update(env)

        logger.debug("Executing: %s (cwd=%s)", " ".join(command), cwd)
        start = time.monotonic()

        try:
            proc = subprocess.run(
                argv,
                cwd=cwd,
                env=full_env,
                capture_output=capture,
                text=capture,
                check=False,
            )
        except FileNotFoundError as e:
            logger.debug("Executable not found: %s (%s)", program, e)
            return ExecutionResult.not_found(
                command, error=f"spawn {program} ENOENT: {e}"
            )
        except OSError as e:
            logger.debug("Cannot start %s: %s", program, e)
            return ExecutionResult.failure(
                command=command,
                error=f"Cannot start {program}: {e}",
                returncode=None,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (proc.stdout or "") if capture else ""
        stderr = (proc.stderr or "") if capture else ""

        if proc.returncode == 0:
            return ExecutionResult.success(
                command,
                stdout=stdout,
                stderr=stderr,
                duration_ms=elapsed_ms,
            )

        failed = ExecutionResult(
            command=command,
            returncode=proc.returncode,
            stdout=stdout,
            stderr=stderr,
            duration_ms=elapsed_ms,
        )
        if proc.returncode < 0:
            reason = f"Command terminated by signal {-proc.returncode}"
        else:
            reason = f"Command failed ({proc.returncode})"
        return failed.model_copy(update={"error": f"{reason}: {failed.command_line}"})
