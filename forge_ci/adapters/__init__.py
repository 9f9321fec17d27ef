"""Adapters — process bindings for the Forge CLI, npm and shells.

Public re-exports for convenient access.
"""

from forge_ci.adapters.base import Runner
from forge_ci.adapters.mock import MockRunner
from forge_ci.adapters.shell.command import SubprocessRunner
from forge_ci.adapters.shell.script import ScriptRunner

__all__ = [
    "MockRunner",
    "Runner",
    "ScriptRunner",
    "SubprocessRunner",
]
