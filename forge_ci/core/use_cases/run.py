"""
Run use case — one full forge-ci invocation.

This is the top-level orchestrator: it opens the pipeline channels,
resolves inputs, and hands everything to the Sequencer. Any error that
aborts the run is written to the summary here, so every entry point
(CLI, tests) reports failures the same way.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from forge_ci.adapters.base import Runner
from forge_ci.adapters.shell.script import ScriptRunner
from forge_ci.core.config.inputs import InputSource, load_config, load_inputs_file
from forge_ci.core.engine.commands import CommandPlan, build_plan
from forge_ci.core.engine.sequencer import SequenceReport, Sequencer
from forge_ci.core.errors import ForgeCIError
from forge_ci.core.models.config import ResolvedConfig
from forge_ci.core.persistence.channels import SummaryWriter, channels_from_env

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of a forge-ci run."""

    config: ResolvedConfig | None = None
    plan: CommandPlan | None = None
    report: SequenceReport | None = None
    error: str | None = None
    error_type: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok}
        if self.error:
            result["error"] = self.error
            result["error_type"] = self.error_type
        if self.config:
            result["config"] = self.config.to_dict()
        if self.plan:
            result["plan"] = self.plan.to_dict()
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def resolve_config(
    env: Mapping[str, str],
    inputs_file: Path | None = None,
    base_dir: Path | None = None,
) -> ResolvedConfig:
    """Resolve inputs from ``env``, with an optional inputs file on top.

    Raises:
        ConfigurationError: Bad inputs file, boolean or required input.
    """
    layers: list[Mapping[str, str]] = [env]
    if inputs_file is not None:
        layers.append(load_inputs_file(inputs_file))
    return load_config(InputSource(*layers), base_dir=base_dir)


def run_action(
    env: Mapping[str, str],
    runner: Runner,
    inputs_file: Path | None = None,
    base_dir: Path | None = None,
    platform: str | None = None,
    dry_run: bool = False,
) -> RunResult:
    """Execute the full forge-ci sequence.

    Args:
        env: Ambient environment (inputs, credentials, channel paths).
        runner: Runner for every spawned process.
        inputs_file: Optional YAML inputs layered over ``env``.
        base_dir: Directory ``working-directory`` is relative to.
        platform: Override ``sys.platform`` for interpreter selection.
        dry_run: Resolve and plan only; spawn nothing, check no credentials.

    Returns:
        RunResult; ``error`` is set when the run aborted.
    """
    result = RunResult()
    outputs, summary = channels_from_env(env)

    try:
        config = resolve_config(env, inputs_file=inputs_file, base_dir=base_dir)
        result.config = config

        if dry_run:
            result.plan = build_plan(config)
            return result

        sequencer = Sequencer(
            config=config,
            runner=runner,
            env=env,
            outputs=outputs,
            summary=summary,
            script_runner=ScriptRunner(runner, platform=platform),
        )
        report = sequencer.run()
        result.report = report
        result.plan = report.plan

    except ForgeCIError as e:
        logger.debug("Run aborted: %s", e)
        result.error = str(e)
        result.error_type = type(e).__name__
        _write_failure(summary, str(e))

    except Exception as e:
        logger.exception("Unexpected error during run")
        result.error = str(e) or type(e).__name__
        result.error_type = type(e).__name__
        _write_failure(summary, traceback.format_exc())

    return result


def _write_failure(summary: SummaryWriter, detail: str) -> None:
    """Record the abort in the summary without masking the original error."""
    try:
        summary.write(f"\n### Failed\n```\n{detail.rstrip()}\n```")
    except OSError as e:
        logger.warning("Cannot write failure to %s: %s", summary.path, e)
