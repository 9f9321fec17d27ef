"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from forge_ci.adapters.mock import MockRunner


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """An app directory for the run to work in."""
    app = tmp_path / "app"
    app.mkdir()
    return app


@pytest.fixture
def output_file(tmp_path: Path) -> Path:
    return tmp_path / "github_output"


@pytest.fixture
def summary_file(tmp_path: Path) -> Path:
    return tmp_path / "step_summary.md"


@pytest.fixture
def env(workdir: Path, output_file: Path, summary_file: Path) -> dict[str, str]:
    """A runner-like environment with credentials and channel files."""
    return {
        "FORGE_EMAIL": "ci@example.com",
        "FORGE_API_TOKEN": "s3cr3t-token",
        "INPUT_WORKING_DIRECTORY": str(workdir),
        "GITHUB_OUTPUT": str(output_file),
        "GITHUB_STEP_SUMMARY": str(summary_file),
        "RUNNER_DEBUG": "",
        "FORGE_CI_LOG_LEVEL": "",
        "FORGE_CI_LOG_FILE": "",
    }


@pytest.fixture
def mock_runner() -> MockRunner:
    return MockRunner(default_stdout="7.1.0\n")


@pytest.fixture
def read_outputs():
    """Parse simple ``name=value`` output lines from a file."""

    def _read(path: Path) -> dict[str, str]:
        if not path.exists():
            return {}
        outputs = {}
        for line in path.read_text(encoding="utf-8").splitlines():
            name, _, value = line.partition("=")
            outputs[name] = value
        return outputs

    return _read
