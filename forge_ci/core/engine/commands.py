"""
Command synthesis — build every argument vector a run will spawn.

Everything here is pure: config in, ``list[str]`` out. Building the
whole plan before the first process starts means a bad ``deploy-args``
quote or a missing ``site`` fails the run before anything is installed
or deployed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from forge_ci.core.errors import ConfigurationError
from forge_ci.core.models.config import ResolvedConfig
from forge_ci.core.services.arg_tokenizer import tokenize

FORGE_BIN = "forge"
NPM_BIN = "npm"
FORGE_PACKAGE = "@forge/cli"


@dataclass
class CommandPlan:
    """All command vectors for one run, program first."""

    install_cli: list[str] = field(default_factory=list)
    version_probe: list[str] = field(default_factory=list)
    usage_analytics: list[str] = field(default_factory=list)
    override: list[str] | None = None
    deploy: list[str] | None = None
    install: list[str] | None = None

    def command_lines(self) -> list[str]:
        """Printable lines for every command that will run, in order."""
        commands = [self.install_cli, self.version_probe]
        if self.usage_analytics:
            commands.append(self.usage_analytics)
        for extra in (self.override, self.deploy, self.install):
            if extra is not None:
                commands.append(extra)
        return [" ".join(c) for c in commands]

    def to_dict(self) -> dict:
        return {
            "install_cli": self.install_cli,
            "version_probe": self.version_probe,
            "usage_analytics": self.usage_analytics,
            "override": self.override,
            "deploy": self.deploy,
            "install": self.install,
        }


def build_install_cli_command(version: str) -> list[str]:
    """``npm install --global @forge/cli@<version>``."""
    return [NPM_BIN, "install", "--global", f"{FORGE_PACKAGE}@{version}"]


def build_deploy_args(config: ResolvedConfig) -> list[str]:
    """Forge arguments for ``forge deploy`` (without the program name)."""
    args = ["deploy", "--non-interactive", "-e", config.environment]
    if config.no_verify:
        args.append("--no-verify")
    if config.deploy_tag.strip():
        args.extend(["--tag", config.deploy_tag.strip()])
    if config.deploy_major_version.strip():
        args.extend(["--major-version", config.deploy_major_version.strip()])
    args.extend(tokenize(config.deploy_args))
    return args


def build_install_args(config: ResolvedConfig) -> list[str]:
    """Forge arguments for ``forge install`` (without the program name).

    Raises:
        ConfigurationError: ``site`` or ``product`` is missing.
    """
    site = config.site.strip()
    product = config.product.strip()
    if not site:
        raise ConfigurationError("install=true requires input: site")
    if not product:
        raise ConfigurationError("install=true requires input: product")

    args = [
        "install",
        "--non-interactive",
        "-e",
        config.environment,
        "--site",
        site,
        "--product",
        product.lower(),
    ]
    if config.upgrade:
        args.append("--upgrade")
    if config.confirm_scopes:
        args.append("--confirm-scopes")
    if config.install_major_version.strip():
        args.extend(["--major-version", config.install_major_version.strip()])
    args.extend(tokenize(config.install_args))
    return args


def build_plan(config: ResolvedConfig) -> CommandPlan:
    """Build the full command plan for ``config``.

    An override ``run`` replaces deploy and install entirely.

    Raises:
        ConfigurationError: Missing install fields.
        TokenizationError: Unterminated quote in a free-form string.
    """
    plan = CommandPlan(
        install_cli=build_install_cli_command(config.forge_cli_version),
        version_probe=[FORGE_BIN, "--version"],
    )
    if config.usage_analytics:
        plan.usage_analytics = [FORGE_BIN, "settings", "set", "usage-analytics", "true"]

    if config.has_override:
        plan.override = [FORGE_BIN, *tokenize(config.run)]
        return plan

    if config.deploy:
        plan.deploy = [FORGE_BIN, *build_deploy_args(config)]
    if config.install:
        plan.install = [FORGE_BIN, *build_install_args(config)]
    return plan
