"""
Shell-script runner — run a multi-line ``pre-run`` script.

The interpreter is picked from a small table:

    pwsh / powershell  →  pwsh -NoLogo -NoProfile -NonInteractive -Command <script>
    anything else      →  bash -lc <script>

On Windows, bash is rarely on PATH, so the known Git-for-Windows
locations are tried first. The next candidate is tried only when the
current one could not be found at all; a script that ran and failed
stops the search.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from forge_ci.adapters.base import Runner
from forge_ci.core.models.result import ExecutionResult

logger = logging.getLogger(__name__)

POWERSHELL_SHELLS = frozenset({"pwsh", "powershell"})

POWERSHELL_PREFIX = ["pwsh", "-NoLogo", "-NoProfile", "-NonInteractive", "-Command"]

POSIX_BASH_CANDIDATES = ("bash",)

WINDOWS_BASH_CANDIDATES = (
    "C:\\Program Files\\Git\\bin\\bash.exe",
    "C:\\Program Files (x86)\\Git\\bin\\bash.exe",
    "bash",
)

BASH_NOT_FOUND = (
    "pre-run-shell=bash but bash was not found on this runner. "
    "Use pre-run-shell=pwsh on Windows."
)


def is_windows(platform: str) -> bool:
    return platform.startswith("win")


def interpreter_candidates(shell: str, platform: str) -> list[list[str]]:
    """Ordered interpreter command prefixes for ``shell`` on ``platform``.

    The script text is appended to whichever prefix is used.
    """
    choice = (shell or "").strip().lower()
    if choice in POWERSHELL_SHELLS:
        return [list(POWERSHELL_PREFIX)]

    if choice not in ("", "bash"):
        logger.debug("Unknown pre-run-shell '%s', using bash", shell)

    bashes = WINDOWS_BASH_CANDIDATES if is_windows(platform) else POSIX_BASH_CANDIDATES
    return [[bash, "-lc"] for bash in bashes]


class ScriptRunner:
    """Run a script through the interpreter chosen for this platform."""

    def __init__(self, runner: Runner, platform: str | None = None):
        self._runner = runner
        self._platform = platform or sys.platform

    def run_script(
        self,
        script: str,
        shell: str = "bash",
        cwd: Path | str | None = None,
    ) -> ExecutionResult:
        """Run ``script``; a blank script is a successful no-op."""
        if not (script or "").strip():
            return ExecutionResult.success([])

        body = script.strip()
        candidates = interpreter_candidates(shell, self._platform)

        for prefix in candidates:
            command = [*prefix, body]
            result = self._runner.run(command, cwd=cwd)
            if not result.spawn_failed:
                return result
            logger.debug("Interpreter not found: %s", prefix[0])

        if candidates[0][0] == POWERSHELL_PREFIX[0]:
            return ExecutionResult.not_found(
                candidates[0], error=f"pre-run-shell={shell} but pwsh was not found on this runner."
            )
        return ExecutionResult.not_found(candidates[-1], error=BASH_NOT_FOUND)
