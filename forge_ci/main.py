"""
forge-ci — CLI entrypoint.

Usage:
    forge-ci run
    forge-ci run --inputs-file inputs.yml --dry-run
    forge-ci config check
    forge-ci tokenize '--foo "bar baz"'

Inputs are read from ``INPUT_*`` environment variables, exactly as a
GitHub Actions runner provides them.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from forge_ci import __version__
from forge_ci.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)

_inputs_file_option = click.option(
    "--inputs-file",
    "-i",
    "inputs_file",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="YAML file of inputs layered over INPUT_* variables.",
)


@click.group()
@click.version_option(version=__version__, prog_name="forge-ci")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """forge-ci — deploy and install Forge apps from CI."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(os.environ, verbose=verbose, quiet=quiet, debug=debug),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


@cli.command()
@_inputs_file_option
@click.option("--dry-run", is_flag=True, help="Resolve inputs and print commands without running them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(ctx: click.Context, inputs_file: str | None, dry_run: bool, as_json: bool) -> None:
    """Install the Forge CLI and deploy/install the app."""
    from forge_ci.adapters.shell.command import SubprocessRunner
    from forge_ci.core.use_cases.run import run_action

    result = run_action(
        env=os.environ,
        runner=SubprocessRunner(),
        inputs_file=Path(inputs_file) if inputs_file else None,
        dry_run=dry_run,
    )

    if result.error:
        click.secho(f"❌ {result.error_type}: {result.error}", fg="red", err=True)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.error:
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)

    if dry_run:
        assert result.plan is not None
        click.secho("🔍 Planned commands:", fg="cyan", bold=True)
        for line in result.plan.command_lines():
            click.echo(f"   $ {line}")
        return

    report = result.report
    assert report is not None
    if quiet:
        return

    click.echo()
    click.secho("✅ forge-ci finished", fg="green", bold=True)
    if report.cli_version:
        click.echo(f"   Forge CLI: {report.cli_version}")
    click.echo(f"   Deployed:  {str(report.deployed).lower()}")
    click.echo(f"   Installed: {str(report.installed).lower()}")
    for receipt in report.best_effort_failures:
        click.secho(f"   ⚠️  {receipt.step} failed (ignored): {receipt.detail}", fg="yellow")


@cli.group()
def config() -> None:
    """Input configuration commands."""


@config.command("check")
@_inputs_file_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def config_check(inputs_file: str | None, as_json: bool) -> None:
    """Resolve inputs and plan commands without running anything."""
    from forge_ci.core.engine.commands import build_plan
    from forge_ci.core.errors import ForgeCIError
    from forge_ci.core.use_cases.run import resolve_config

    try:
        resolved = resolve_config(
            os.environ,
            inputs_file=Path(inputs_file) if inputs_file else None,
        )
        plan = build_plan(resolved)
    except ForgeCIError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho("❌ Configuration error:", fg="red", bold=True)
            click.echo(f"   • {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(
            {"valid": True, "config": resolved.to_dict(), "plan": plan.to_dict()},
            indent=2,
        ))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   Working directory: {resolved.cwd}")
    click.echo(f"   Environment:       {resolved.environment}")
    click.echo(f"   Forge CLI:         {resolved.forge_cli_version}")
    if resolved.has_override:
        click.echo("   Mode:              override (run)")
    else:
        click.echo(f"   Deploy:            {str(resolved.deploy).lower()}")
        click.echo(f"   Install:           {str(resolved.install).lower()}")
    click.echo()


@cli.command()
@click.argument("arg_string")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def tokenize(arg_string: str, as_json: bool) -> None:
    """Show how ARG_STRING is split into arguments."""
    from forge_ci.core.errors import TokenizationError
    from forge_ci.core.services.arg_tokenizer import tokenize as split_args

    try:
        tokens = split_args(arg_string)
    except TokenizationError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(tokens))
        return

    for i, token in enumerate(tokens):
        click.echo(f"  [{i}] {token}")


def main() -> None:
    """Entry point for the console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
