"""
ExecutionResult and StepReceipt models — the execution contract.

ExecutionResult is what a runner hands back for one process: it never
raises for a failed command, the failure is a value. StepReceipt is
what the sequencer records for one step: ok, skipped, or a
best-effort failure that was noted and passed over.

Required-step failures never become receipts. The sequencer turns
them into ``ExecutionError`` and the run stops.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ExecutionResult(BaseModel):
    """Outcome of one subprocess run."""

    command: list[str] = Field(default_factory=list)
    returncode: int | None = None      # None = never started
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    spawn_failed: bool = False         # executable not found
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command ran and exited 0."""
        return self.error is None and self.returncode == 0

    @property
    def command_line(self) -> str:
        """The command as a single space-joined line."""
        return " ".join(self.command)

    @property
    def output(self) -> str:
        """Captured stdout, falling back to stderr when stdout is empty."""
        return self.stdout.strip() or self.stderr.strip()

    @classmethod
    def success(cls, command: list[str], **kwargs: Any) -> ExecutionResult:
        """Create a success result."""
        return cls(command=command, returncode=0, **kwargs)

    @classmethod
    def failure(
        cls,
        command: list[str],
        error: str,
        **kwargs: Any,
    ) -> ExecutionResult:
        """Create a failure result."""
        kwargs.setdefault("returncode", 1)
        return cls(command=command, error=error, **kwargs)

    @classmethod
    def not_found(cls, command: list[str], error: str = "") -> ExecutionResult:
        """Create a result for a program that could not be found."""
        program = command[0] if command else "<empty>"
        return cls(
            command=command,
            returncode=None,
            error=error or f"spawn {program} ENOENT: executable not found",
            spawn_failed=True,
        )


class StepReceipt(BaseModel):
    """The recorded outcome of one sequenced step."""

    step: str
    status: Literal["ok", "skipped", "best_effort_failure"] = "ok"
    recorded_at: str = Field(default_factory=_now_iso)
    detail: str = ""
    result: ExecutionResult | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def success(cls, step: str, result: ExecutionResult | None = None) -> StepReceipt:
        return cls(step=step, status="ok", result=result)

    @classmethod
    def skip(cls, step: str, reason: str = "") -> StepReceipt:
        return cls(step=step, status="skipped", detail=reason)

    @classmethod
    def best_effort_failure(cls, step: str, result: ExecutionResult) -> StepReceipt:
        return cls(
            step=step,
            status="best_effort_failure",
            detail=result.error or "",
            result=result,
        )

