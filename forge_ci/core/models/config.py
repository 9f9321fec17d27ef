"""
ResolvedConfig — the typed, immutable view of every action input.

Built once by ``forge_ci.core.config.inputs.load_config`` and then
only read. Field names mirror the input names with hyphens turned
into underscores (``deploy-major-version`` → ``deploy_major_version``).
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ResolvedConfig(BaseModel):
    """All inputs, coerced and defaulted."""

    model_config = ConfigDict(frozen=True)

    # Where the app lives
    working_directory: str = "."
    cwd: Path = Path(".")

    # Tool setup
    forge_cli_version: str = "latest"
    pre_run: str = ""
    pre_run_shell: str = "bash"
    usage_analytics: bool = True

    environment: str = "staging"

    # Override: replaces deploy/install entirely
    run: str = ""

    # Deploy
    deploy: bool = True
    no_verify: bool = False
    deploy_tag: str = ""
    deploy_major_version: str = ""
    deploy_args: str = ""

    # Install
    install: bool = False
    site: str = ""
    product: str = ""
    upgrade: bool = True
    confirm_scopes: bool = True
    install_major_version: str = ""
    install_args: str = ""

    @property
    def has_pre_run(self) -> bool:
        return bool(self.pre_run.strip())

    @property
    def has_override(self) -> bool:
        return bool(self.run.strip())

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["cwd"] = str(self.cwd)
        return data
