"""
Input resolver — reads action inputs into a ResolvedConfig.

Inputs arrive as flat ``INPUT_<NAME>`` entries in a key/value mapping
(the process environment on a runner, a plain dict in tests). This
module normalizes names, applies defaults, enforces required inputs
and coerces boolean tokens, then builds the frozen ResolvedConfig.

An optional YAML inputs file can be layered on top, which makes a
pipeline run reproducible from a workstation.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path

import yaml

from forge_ci.core.errors import ConfigurationError
from forge_ci.core.models.config import ResolvedConfig

logger = logging.getLogger(__name__)

INPUT_PREFIX = "INPUT_"

TRUE_TOKENS = frozenset({"1", "true", "yes", "y", "on"})
FALSE_TOKENS = frozenset({"0", "false", "no", "n", "off"})

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


def normalize_input_name(name: str) -> str:
    """Map an input name to its environment key.

    Every non-alphanumeric character becomes ``_``:
    ``working-directory`` → ``INPUT_WORKING_DIRECTORY``.
    """
    return INPUT_PREFIX + _NON_ALNUM.sub("_", name).upper()


def runner_input_name(name: str) -> str:
    """The key a GitHub runner sets: spaces folded, hyphens kept."""
    return INPUT_PREFIX + name.replace(" ", "_").upper()


def to_bool(value: str | None, default: bool = False) -> bool:
    """Coerce a boolean input token.

    Accepts (case-insensitive) ``1/true/yes/y/on`` and
    ``0/false/no/n/off``. Empty input yields ``default``.

    Raises:
        ConfigurationError: For any other token.
    """
    token = (value or "").strip().lower()
    if token == "":
        return default
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    raise ConfigurationError(f'Invalid boolean value: "{value}"')


class InputSource(Mapping[str, str]):
    """Read-only view of action inputs over any string mapping.

    Layers are consulted last-to-first, so later layers win. The first
    layer is normally ``os.environ``.
    """

    def __init__(self, *layers: Mapping[str, str]):
        self._layers: tuple[Mapping[str, str], ...] = layers or ({},)

    def __getitem__(self, key: str) -> str:
        for layer in reversed(self._layers):
            if key in layer:
                return layer[key]
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for layer in reversed(self._layers):
            for key in layer:
                if key not in seen:
                    seen.add(key)
                    yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def raw(self, name: str) -> str:
        """Raw text of an input, empty when unset."""
        for key in (normalize_input_name(name), runner_input_name(name)):
            value = self.get(key)
            if value is not None:
                return str(value)
        return ""

    def resolve(
        self,
        name: str,
        *,
        required: bool = False,
        default: str = "",
        trim: bool = True,
    ) -> str:
        """Resolve one input.

        Args:
            name: Input name as documented (``deploy-tag``).
            required: Fail when the final value is blank.
            default: Used when the input is unset or blank.
            trim: Strip surrounding whitespace. Disable for script bodies.

        Raises:
            ConfigurationError: Required input missing.
        """
        raw = self.raw(name)
        value = raw.strip() if trim else raw
        out = value if value else default
        if required and not out.strip():
            raise ConfigurationError(f"Missing required input: {name}")
        return out

    def flag(self, name: str, default: bool) -> bool:
        """Resolve a boolean input with its default."""
        return to_bool(
            self.resolve(name, default="true" if default else "false"),
            default,
        )


def load_inputs_file(path: Path) -> dict[str, str]:
    """Load a YAML inputs file into ``INPUT_*`` keys.

    The file is a flat mapping of input name to scalar value::

        environment: production
        deploy-tag: v2
        install: true

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    if not path.is_file():
        raise ConfigurationError(f"Inputs file not found: {path}")

    logger.debug("Loading inputs from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Expected a YAML mapping in {path}, got {type(data).__name__}"
        )

    inputs: dict[str, str] = {}
    for name, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            text = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            text = str(value)
        else:
            raise ConfigurationError(
                f"Input '{name}' in {path} must be a scalar, got {type(value).__name__}"
            )
        inputs[normalize_input_name(str(name))] = text

    logger.info("Loaded %d inputs from %s", len(inputs), path)
    return inputs


def load_config(source: InputSource, base_dir: Path | None = None) -> ResolvedConfig:
    """Resolve every input into a ResolvedConfig.

    Args:
        source: Where inputs are read from.
        base_dir: Directory the working directory is relative to
            (default: the process cwd).

    Raises:
        ConfigurationError: On an invalid boolean or missing required input.
    """
    working_directory = source.resolve("working-directory", default=".")
    cwd = ((base_dir or Path.cwd()) / working_directory).resolve()

    config = ResolvedConfig(
        working_directory=working_directory,
        cwd=cwd,
        forge_cli_version=source.resolve("forge-cli-version", default="latest"),
        pre_run=source.resolve("pre-run", trim=False),
        pre_run_shell=source.resolve("pre-run-shell", default="bash"),
        usage_analytics=source.flag("usage-analytics", True),
        environment=source.resolve("environment", default="staging"),
        run=source.resolve("run"),
        deploy=source.flag("deploy", True),
        no_verify=source.flag("no-verify", False),
        deploy_tag=source.resolve("deploy-tag"),
        deploy_major_version=source.resolve("deploy-major-version"),
        deploy_args=source.resolve("deploy-args"),
        install=source.flag("install", False),
        site=source.resolve("site"),
        product=source.resolve("product"),
        upgrade=source.flag("upgrade", True),
        confirm_scopes=source.flag("confirm-scopes", True),
        install_major_version=source.resolve("install-major-version"),
        install_args=source.resolve("install-args"),
    )
    logger.debug(
        "Resolved config: env=%s deploy=%s install=%s override=%s",
        config.environment,
        config.deploy,
        config.install,
        config.has_override,
    )
    return config
