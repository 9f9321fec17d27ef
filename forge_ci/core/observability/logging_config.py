"""
Logging configuration for the forge-ci CLI.

``setup_logging`` runs once from main.py; modules just call
``logging.getLogger(__name__)``.

Console level, highest precedence first:
    --debug / --verbose / --quiet  >  RUNNER_DEBUG=1  >  FORGE_CI_LOG_LEVEL  >  WARNING

FORGE_CI_LOG_FILE adds a file handler, at FORGE_CI_LOG_FILE_LEVEL if set.

Everything goes to stderr. Stdout carries the output of the wrapped
forge and npm processes.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

CONSOLE_FORMAT = "forge-ci %(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"

LOG_LEVEL_ENV = "FORGE_CI_LOG_LEVEL"
LOG_FILE_ENV = "FORGE_CI_LOG_FILE"
LOG_FILE_LEVEL_ENV = "FORGE_CI_LOG_FILE_LEVEL"
RUNNER_DEBUG_ENV = "RUNNER_DEBUG"


def resolve_level(
    env: Mapping[str, str],
    verbose: bool = False,
    quiet: bool = False,
    debug: bool = False,
) -> str:
    """Pick the console level from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    if env.get(RUNNER_DEBUG_ENV) == "1":
        return "DEBUG"
    return env.get(LOG_LEVEL_ENV) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root handlers with a stderr handler and an optional file.

    Args:
        level: Console level name. Unknown names mean WARNING.
        log_file: Path of a log file to append to.
        log_file_level: Level for ``log_file``; defaults to ``level``.
    """
    handlers: list[logging.Handler] = []

    console_level = _parse_level(level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers.append(console)

    if log_file:
        file_level = _parse_level(log_file_level or level)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
