"""
Configuration for the Dogwood REPL.

Values are layered, later sources winning:

1. Defaults on ``ReplConfig``
2. The ``[repl]`` table of a TOML file (``dogwood.toml`` in the working
   directory, or an explicit path)
3. ``DOGWOOD_*`` environment variables
4. Command-line flags (applied by the CLI via ``dataclasses.replace``)

Example ``dogwood.toml``:

    [repl]
    prompt = "calc> "
    show_rpn = false
    color = "never"
    log_level = "INFO"
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from dogwood.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "dogwood.toml"
ENV_PREFIX = "DOGWOOD_"

COLOR_MODES = ("auto", "always", "never")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ReplConfig:
    """REPL settings."""

    prompt: str = ">>> "
    show_rpn: bool = True
    color: str = "auto"  # "auto" | "always" | "never"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.color not in COLOR_MODES:
            raise ConfigError(f"color must be one of {', '.join(COLOR_MODES)}, got {self.color!r}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"unknown log level {self.log_level!r}")
        object.__setattr__(self, "log_level", self.log_level.upper())

    @property
    def force_terminal(self) -> bool | None:
        """Value for rich's ``Console(force_terminal=...)``."""
        return {"auto": None, "always": True, "never": False}[self.color]


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> ReplConfig:
    """Load configuration from file and environment.

    Args:
        path: Explicit TOML file. Must exist if given. When omitted,
            ``dogwood.toml`` in the working directory is used if present.
        environ: Environment mapping (defaults to ``os.environ``).

    Raises:
        ConfigError: On unreadable TOML or invalid values.
    """
    values: dict[str, Any] = {}

    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        path = candidate if candidate.exists() else None
    elif not path.exists():
        raise ConfigError("config file not found", path)

    if path is not None:
        values.update(_read_toml(path))

    values.update(_read_env(os.environ if environ is None else environ))
    return _build(values, path)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"cannot read config file: {e.strerror or e}", path) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML: {e}", path) from e

    repl = data.get("repl", {})
    if not isinstance(repl, dict):
        raise ConfigError("[repl] must be a table", path)

    known = {f.name for f in fields(ReplConfig)}
    for key in repl.keys() - known:
        logger.warning("Ignoring unknown [repl] key '%s' in %s", key, path)
    logger.debug("Loaded config from %s", path)
    return {k: v for k, v in repl.items() if k in known}


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for f in fields(ReplConfig):
        raw = environ.get(ENV_PREFIX + f.name.upper())
        if raw is None:
            continue
        if f.name == "show_rpn":
            values[f.name] = _parse_bool(raw, ENV_PREFIX + f.name.upper())
        else:
            values[f.name] = raw
    return values


def _parse_bool(raw: str, name: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _build(values: dict[str, Any], path: Path | None) -> ReplConfig:
    if "show_rpn" in values and not isinstance(values["show_rpn"], bool):
        raise ConfigError("show_rpn must be a boolean", path)
    for key in ("prompt", "color", "log_level"):
        if key in values and not isinstance(values[key], str):
            raise ConfigError(f"{key} must be a string", path)
    return ReplConfig(**values)
