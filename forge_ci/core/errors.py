"""
Error taxonomy — every failure the run can abort with.

All fatal errors derive from ``ForgeCIError`` so the CLI can catch
them in one place, write them to the summary channel and exit 1.

Best-effort failures (version probe, usage-analytics toggle) are NOT
exceptions. They are recorded as ``StepReceipt`` values and the run
continues.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from forge_ci.core.models.result import ExecutionResult


class ForgeCIError(Exception):
    """Base class for errors that abort the run."""


class ConfigurationError(ForgeCIError):
    """An input is missing, malformed, or inconsistent with another input."""


class TokenizationError(ConfigurationError):
    """A free-form argument string could not be split (unterminated quote)."""


class PreconditionError(ForgeCIError):
    """The environment is not fit to run: no working directory, no credentials."""


class ExecutionError(ForgeCIError):
    """A required step's command failed."""

    def __init__(self, step: str, result: ExecutionResult):
        self.step = step
        self.result = result
        super().__init__(f"Step '{step}' failed: {result.error or 'unknown error'}")
