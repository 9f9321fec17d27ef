"""
Domain models — Pydantic types for a forge-ci run.

    from forge_ci.core.models import ResolvedConfig, ExecutionResult, StepReceipt
"""

from forge_ci.core.models.config import ResolvedConfig
from forge_ci.core.models.result import ExecutionResult, StepReceipt

__all__ = [
    "ExecutionResult",
    "ResolvedConfig",
    "StepReceipt",
]
