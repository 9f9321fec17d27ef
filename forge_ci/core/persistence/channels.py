"""
Pipeline channels — append-only output and summary files.

The runner hands the step two file paths in its environment:

    GITHUB_OUTPUT        key=value lines read back as step outputs
    GITHUB_STEP_SUMMARY  markdown rendered on the run's summary page

Both are append-only. When a path is not set (local runs) writes are
dropped.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

OUTPUT_ENV = "GITHUB_OUTPUT"
SUMMARY_ENV = "GITHUB_STEP_SUMMARY"


class _AppendFile:
    def __init__(self, path: Path | str | None):
        self._path = Path(path) if path else None

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def enabled(self) -> bool:
        return self._path is not None

    def _append(self, text: str) -> None:
        if self._path is None:
            return
        with self._path.open("a", encoding="utf-8") as f:
            f.write(text)


class OutputWriter(_AppendFile):
    """Step outputs. Each write appends one ``name=value`` entry."""

    def __init__(self, path: Path | str | None = None):
        super().__init__(path)
        self._written: dict[str, str] = {}

    @property
    def written(self) -> dict[str, str]:
        """Last value written per key during this run."""
        return dict(self._written)

    def write(self, name: str, value: object) -> None:
        text = str(value).lower() if isinstance(value, bool) else str(value)
        self._written[name] = text

        if not self.enabled:
            logger.debug("No %s set, dropping output %s", OUTPUT_ENV, name)
            return

        if "\n" in text or "\r" in text:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            self._append(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
        else:
            self._append(f"{name}={text}\n")
        logger.debug("Output %s=%s", name, text)


class SummaryWriter(_AppendFile):
    """Job summary. Advisory only, never parsed back."""

    def __init__(self, path: Path | str | None = None):
        super().__init__(path)
        self._sections: list[str] = []

    @property
    def sections(self) -> list[str]:
        """Everything written during this run, in order."""
        return list(self._sections)

    @property
    def text(self) -> str:
        return "\n".join(self._sections)

    def write(self, markdown: str) -> None:
        self._sections.append(markdown)
        self._append(f"{markdown}\n")


def channels_from_env(env: Mapping[str, str]) -> tuple[OutputWriter, SummaryWriter]:
    """Build both writers from the runner-provided paths."""
    return (
        OutputWriter(env.get(OUTPUT_ENV) or None),
        SummaryWriter(env.get(SUMMARY_ENV) or None),
    )
