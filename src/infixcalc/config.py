"""
Settings for the infixcalc service and CLI.

Settings come from an optional ``infixcalc.toml`` file, overridden by
environment variables:

    [engine]
    max_depth = 200

    [server]
    host = "127.0.0.1"
    port = 8000

    [logging]
    level = "INFO"

    [variables]
    g = 9.80665

Environment values:
    INFIXCALC_MAX_DEPTH, INFIXCALC_HOST, INFIXCALC_PORT, INFIXCALC_LOG_LEVEL
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from infixcalc.core.catalog import default_registry
from infixcalc.core.compiler import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT
from infixcalc.core.errors import ConfigError, RegistryError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "infixcalc.toml"
ENV_PREFIX = "INFIXCALC_"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass
class EngineConfig:
    """Compiler limits."""

    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass
class ServerConfig:
    """HTTP server binding."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class Settings:
    engine: EngineConfig = field(default_factory=EngineConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"
    variables: dict[str, float] = field(default_factory=dict)


def _as_int(value: Any, key: str, *, minimum: int, maximum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from e
    if number < minimum:
        raise ConfigError(f"{key} must be at least {minimum}, got {number}")
    if maximum is not None and number > maximum:
        raise ConfigError(f"{key} must be at most {maximum}, got {number}")
    return number


def _as_level(value: Any, key: str) -> str:
    level = str(value).upper().strip()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"{key} must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
    return level


def _as_variables(table: Any) -> dict[str, float]:
    if not isinstance(table, dict):
        raise ConfigError("[variables] must be a table of name = number")
    variables: dict[str, float] = {}
    for name, value in table.items():
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ConfigError(f"Variable {name!r} must be a number, got {value!r}")
        variables[name] = float(value)
    try:
        default_registry().with_variables(variables)
    except RegistryError as e:
        raise ConfigError(f"Invalid variable in [variables]: {e}") from e
    return variables


def load_settings(path: Path | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Load settings from a TOML file and the environment.

    Args:
        path: Config file. When omitted, ``infixcalc.toml`` in the working
            directory is used if it exists.
        environ: Environment mapping; ``os.environ`` by default.

    Raises:
        ConfigError: If the file is unreadable or a value is invalid.
    """
    env = os.environ if environ is None else environ
    settings = Settings()

    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_FILE
        path = candidate if candidate.exists() else None
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    if path is not None:
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e
        logger.debug("Loaded settings from %s", path)

        engine = data.get("engine", {})
        if "max_depth" in engine:
            settings.engine.max_depth = _as_int(
                engine["max_depth"], "engine.max_depth", minimum=1, maximum=MAX_DEPTH_LIMIT
            )

        server = data.get("server", {})
        if "host" in server:
            settings.server.host = str(server["host"])
        if "port" in server:
            settings.server.port = _as_int(server["port"], "server.port", minimum=0)

        if "level" in data.get("logging", {}):
            settings.log_level = _as_level(data["logging"]["level"], "logging.level")

        if "variables" in data:
            settings.variables = _as_variables(data["variables"])

    # Environment overrides
    if value := env.get(f"{ENV_PREFIX}MAX_DEPTH"):
        settings.engine.max_depth = _as_int(
            value, f"{ENV_PREFIX}MAX_DEPTH", minimum=1, maximum=MAX_DEPTH_LIMIT
        )
    if value := env.get(f"{ENV_PREFIX}HOST"):
        settings.server.host = value
    if value := env.get(f"{ENV_PREFIX}PORT"):
        settings.server.port = _as_int(value, f"{ENV_PREFIX}PORT", minimum=0)
    if value := env.get(f"{ENV_PREFIX}LOG_LEVEL"):
        settings.log_level = _as_level(value, f"{ENV_PREFIX}LOG_LEVEL")

    return settings
