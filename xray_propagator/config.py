"""Configuration loading for xray-propagator.

Sources, lowest to highest priority:

1. defaults
2. TOML config file (``./xray_propagator.toml`` or ``~/.xray_propagator/config.toml``)
3. ``XRAY_PROPAGATOR_*`` environment variables
4. explicit overrides passed by the caller
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from xray_propagator.errors import ConfigError

ENV_PREFIX = "XRAY_PROPAGATOR_"
CONFIG_FILE_NAME = "xray_propagator.toml"
HOME_CONFIG_PATH = Path(".xray_propagator") / "config.toml"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}

# env var suffix -> (section, key)
_ENV_VARS = {
    "LAMBDA_FALLBACK": ("propagation", "lambda_fallback"),
    "COMPOSITE": ("propagation", "composite"),
    "SET_GLOBAL": ("propagation", "set_global"),
    "DEBUG": ("logging", "debug"),
}


class PropagationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lambda_fallback: bool = False
    composite: bool = False
    set_global: bool = True


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    debug: bool = False


class XRayPropagatorConfig(BaseModel):
    """Top-level configuration; one section per TOML table."""

    model_config = ConfigDict(extra="forbid")

    propagation: PropagationConfig = Field(default_factory=PropagationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def find_config_file() -> Optional[str]:
    """Return the first existing config file path, or None."""
    candidates = [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.home() / HOME_CONFIG_PATH,
    ]
    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)
    return None


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file.

    Returns an empty dict when the file does not exist and raises
    ConfigError when it cannot be parsed.
    """
    config_path = Path(path)
    if not config_path.is_file():
        return {}

    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError("Invalid TOML in config file", details={"path": path, "error": exc}) from exc


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError("Invalid boolean environment variable", details={"name": name, "value": raw})


def load_config_from_env(flat: bool = False) -> Dict[str, Any]:
    """
    Read ``XRAY_PROPAGATOR_*`` environment variables.

    Args:
        flat: return ``{key: value}`` instead of ``{section: {key: value}}``

    Missing variables are left out of the result.
    """
    result: Dict[str, Any] = {}
    for suffix, (section, key) in _ENV_VARS.items():
        name = ENV_PREFIX + suffix
        raw = os.environ.get(name)
        if raw is None:
            continue
        value = _parse_bool(name, raw)
        if flat:
            result[key] = value
        else:
            result.setdefault(section, {})[key] = value
    return result


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> XRayPropagatorConfig:
    """
    Build the effective configuration.

    Priority: overrides > environment > config file > defaults.
    """
    path = config_file or find_config_file()
    data = load_toml_config(path) if path else {}
    data = _merge(data, load_config_from_env())
    data = _merge(data, overrides or {})

    try:
        return XRayPropagatorConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigError(
            "Invalid configuration",
            details={"errors": exc.error_count(), "first": exc.errors()[0]["msg"]},
        ) from exc


def validate_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Tuple[bool, str, Optional[XRayPropagatorConfig]]:
    """Return ``(is_valid, message, config)``; config is None when invalid."""
    try:
        config = load_config(config_file=config_file, overrides=overrides)
    except ConfigError as exc:
        return False, str(exc), None
    return True, "Configuration is valid", config
