"""
Sequencer — the ordered run of a forge-ci invocation.

The run is a fixed list of steps driven by one loop:

    validate → plan → pre-run → install CLI → version probe
             → usage analytics → (override | deploy → install)

Each step is a ``Step`` descriptor: what to run, whether it is
required, whether it is enabled, and what to record on success or
skip. ``run_steps`` is the only place that decides what a failure
means. A required step that fails raises ``ExecutionError`` and the
remaining steps never start. A best-effort step that fails is noted
in the summary and recorded as a receipt.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from forge_ci.adapters.base import Runner
from forge_ci.adapters.shell.script import ScriptRunner
from forge_ci.core.engine.commands import CommandPlan, build_plan
from forge_ci.core.errors import ExecutionError, PreconditionError
from forge_ci.core.models.config import ResolvedConfig
from forge_ci.core.models.result import ExecutionResult, StepReceipt
from forge_ci.core.persistence.channels import OutputWriter, SummaryWriter

logger = logging.getLogger(__name__)

AUTH_EMAIL_ENV = "FORGE_EMAIL"
AUTH_TOKEN_ENV = "FORGE_API_TOKEN"

OUTPUT_DEPLOYED = "deployed"
OUTPUT_INSTALLED = "installed"
OUTPUT_CLI_VERSION = "forge_cli_version"


@dataclass
class Step:
    """One entry in the run."""

    name: str
    action: Callable[[], ExecutionResult]
    required: bool = True
    enabled: bool = True
    heading: str = ""                  # summary text written before the action
    failure_note: str = ""             # summary text when a best-effort step fails
    on_success: Callable[[ExecutionResult], None] | None = None
    on_skip: Callable[[], None] | None = None


@dataclass
class SequenceReport:
    """What happened during a run."""

    deployed: bool = False
    installed: bool = False
    cli_version: str = ""
    receipts: list[StepReceipt] = field(default_factory=list)
    plan: CommandPlan | None = None

    @property
    def best_effort_failures(self) -> list[StepReceipt]:
        return [r for r in self.receipts if r.status == "best_effort_failure"]

    def to_dict(self) -> dict:
        return {
            "deployed": self.deployed,
            "installed": self.installed,
            "cli_version": self.cli_version,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def run_steps(steps: list[Step], summary: SummaryWriter) -> list[StepReceipt]:
    """Execute ``steps`` in order and return their receipts.

    Raises:
        ExecutionError: The first required step that fails.
    """
    receipts: list[StepReceipt] = []

    for step in steps:
        if not step.enabled:
            logger.debug("⊘ %s (disabled)", step.name)
            if step.on_skip:
                step.on_skip()
            receipts.append(StepReceipt.skip(step.name, "disabled"))
            continue

        if step.heading:
            summary.write(step.heading)

        result = step.action()

        if result.ok:
            logger.info("✓ %s", step.name)
            if step.on_success:
                step.on_success(result)
            receipts.append(StepReceipt.success(step.name, result))
            continue

        if step.required:
            logger.error("✗ %s: %s", step.name, result.error)
            raise ExecutionError(step.name, result)

        logger.warning("✗ %s (continuing): %s", step.name, result.error)
        if step.failure_note:
            summary.write(step.failure_note)
        receipts.append(StepReceipt.best_effort_failure(step.name, result))

    return receipts


def validate_preconditions(config: ResolvedConfig, env: Mapping[str, str]) -> None:
    """Check the working directory and Forge credentials.

    Credentials are read from the ambient environment only, and only
    their presence is checked. They are never logged.

    Raises:
        PreconditionError: Missing directory or credentials.
    """
    if not config.cwd.is_dir():
        raise PreconditionError(f"working-directory does not exist: {config.cwd}")

    email = (env.get(AUTH_EMAIL_ENV) or "").strip()
    token = (env.get(AUTH_TOKEN_ENV) or "").strip()
    if not email or not token:
        raise PreconditionError(
            f"Missing {AUTH_EMAIL_ENV} and/or {AUTH_TOKEN_ENV} in environment. "
            "Store them as GitHub Actions secrets and pass them via env."
        )


class Sequencer:
    """Drive one forge-ci run against a runner and the pipeline channels."""

    def __init__(
        self,
        config: ResolvedConfig,
        runner: Runner,
        env: Mapping[str, str],
        outputs: OutputWriter | None = None,
        summary: SummaryWriter | None = None,
        script_runner: ScriptRunner | None = None,
    ):
        self.config = config
        self.runner = runner
        self.env = env
        self.outputs = outputs or OutputWriter()
        self.summary = summary or SummaryWriter()
        self.script_runner = script_runner or ScriptRunner(runner)

    def run(self) -> SequenceReport:
        """Validate, plan and execute.

        Raises:
            ConfigurationError: Install fields missing or bad quoting.
            PreconditionError: Directory or credentials missing.
            ExecutionError: A required step failed.
        """
        config = self.config
        validate_preconditions(config, self.env)

        report = SequenceReport(plan=build_plan(config))

        self.summary.write(
            f"## Forge CI\n\nWorking directory: `{config.working_directory}`"
            f"\n\nEnvironment: `{config.environment}`"
        )

        report.receipts = run_steps(self.build_steps(report), self.summary)

        if report.deployed or report.installed:
            self.summary.write(
                f"\n### Result\nDeployed: `{_flag(report.deployed)}`"
                f"\n\nInstalled: `{_flag(report.installed)}`"
            )
        return report

    def build_steps(self, report: SequenceReport) -> list[Step]:
        """The ordered step list for ``report.plan``."""
        config = self.config
        plan = report.plan
        assert plan is not None
        cwd = config.cwd

        def run(command: list[str], capture: bool = False) -> Callable[[], ExecutionResult]:
            return lambda: self.runner.run(command, cwd=cwd, capture=capture)

        def record_version(result: ExecutionResult) -> None:
            report.cli_version = result.output
            self.outputs.write(OUTPUT_CLI_VERSION, report.cli_version)
            self.summary.write(f"\nReported by `forge --version`: `{report.cli_version}`")

        def record_deployed(result: ExecutionResult) -> None:
            report.deployed = True
            self.outputs.write(OUTPUT_DEPLOYED, True)

        def record_installed(result: ExecutionResult) -> None:
            report.installed = True
            self.outputs.write(OUTPUT_INSTALLED, True)

        steps = [
            Step(
                name="pre-run",
                action=lambda: self.script_runner.run_script(
                    config.pre_run, config.pre_run_shell, cwd
                ),
                enabled=config.has_pre_run,
                heading="\n### Pre-run\nRunning pre-run commands.",
            ),
            Step(
                name="install-cli",
                action=run(plan.install_cli),
                heading=f"\n### Forge CLI\nInstalling @forge/cli@{config.forge_cli_version}",
            ),
            Step(
                name="version-probe",
                action=run(plan.version_probe, capture=True),
                required=False,
                failure_note="\nCould not capture `forge --version` output.",
                on_success=record_version,
            ),
            Step(
                name="usage-analytics",
                action=run(plan.usage_analytics),
                required=False,
                enabled=bool(plan.usage_analytics),
                failure_note=(
                    "\nNote: forge settings set usage-analytics true failed. Continuing."
                ),
            ),
        ]

        if plan.override is not None:
            steps.append(
                Step(
                    name="run",
                    action=run(plan.override),
                    heading=f"\n### Run\nExecuting: `{' '.join(plan.override)}`",
                )
            )
            return steps

        steps.append(
            Step(
                name="deploy",
                action=run(plan.deploy or []),
                enabled=plan.deploy is not None,
                heading=f"\n### Deploy\nExecuting: `{' '.join(plan.deploy or [])}`",
                on_success=record_deployed,
                on_skip=lambda: self.outputs.write(OUTPUT_DEPLOYED, False),
            )
        )
        steps.append(
            Step(
                name="install",
                action=run(plan.install or []),
                enabled=plan.install is not None,
                heading=f"\n### Install\nExecuting: `{' '.join(plan.install or [])}`",
                on_success=record_installed,
                on_skip=lambda: self.outputs.write(OUTPUT_INSTALLED, False),
            )
        )
        return steps


def _flag(value: bool) -> str:
    return "true" if value else "false"
