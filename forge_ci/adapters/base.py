"""
Runner base — the contract between the sequencer and processes.

The sequencer only talks to processes through this interface, never
through ``subprocess`` directly. That keeps every step testable with
``MockRunner``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from forge_ci.core.models.result import ExecutionResult


class Runner(ABC):
    """Abstract base class for command runners.

    Runners spawn a program with an argument vector and return an
    ExecutionResult. They NEVER raise for a failed or missing program.
    Failures are captured in the result.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'subprocess', 'mock')."""

    @abstractmethod
    def run(
        self,
        command: list[str],
        *,
        cwd: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        capture: bool = False,
    ) -> ExecutionResult:
        """Run ``command`` (program first) and wait for it.

        Args:
            command: Program and arguments, passed as a vector.
            cwd: Working directory.
            env: Variables layered over the inherited environment.
            capture: Capture stdout/stderr instead of inheriting them.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
