"""
Mock runner — test double for every process the sequencer spawns.

Records each command it receives and answers with scripted results.
By default every command succeeds. Responses are keyed by a command
prefix, so ``("forge", "deploy")`` matches any deploy invocation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from forge_ci.adapters.base import Runner
from forge_ci.core.models.result import ExecutionResult


@dataclass
class RecordedCall:
    """One call the mock received."""

    command: list[str]
    cwd: Path | str | None = None
    env: Mapping[str, str] | None = None
    capture: bool = False


class MockRunner(Runner):
    """Universal mock runner for testing."""

    def __init__(
        self,
        default_stdout: str = "",
        missing: set[str] | None = None,
    ):
        self._default_stdout = default_stdout
        self._missing = set(missing or ())
        self._responses: list[tuple[tuple[str, ...], ExecutionResult]] = []
        self._call_log: list[RecordedCall] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[RecordedCall]:
        """All calls this mock has received."""
        return self._call_log

    @property
    def commands(self) -> list[list[str]]:
        """Just the command vectors, in call order."""
        return [call.command for call in self._call_log]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_response(self, prefix: tuple[str, ...], result: ExecutionResult) -> None:
        """Answer commands starting with ``prefix`` with ``result``."""
        self._responses.insert(0, (tuple(prefix), result))

    def set_failure(
        self,
        prefix: tuple[str, ...],
        error: str = "Mock failure",
        returncode: int = 1,
    ) -> None:
        """Make commands starting with ``prefix`` fail."""
        self.set_response(
            prefix,
            ExecutionResult.failure(command=list(prefix), error=error, returncode=returncode),
        )

    def run(
        self,
        command: list[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = False,
    ) -> ExecutionResult:
        self._call_log.append(
            RecordedCall(command=list(command), cwd=cwd, env=env, capture=capture)
        )

        if command and command[0] in self._missing:
            return ExecutionResult.not_found(list(command))

        for prefix, result in self._responses:
            if tuple(command[: len(prefix)]) == prefix:
                return result.model_copy(update={"command": list(command)})

        return ExecutionResult.success(
            list(command),
            stdout=self._default_stdout if capture else "",
        )

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._responses.clear()
