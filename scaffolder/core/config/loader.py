"""
Configuration loader — reads scaffolder YAML into the config model.

The config file is optional. Resolution order:

    explicit path  >  SCAFFOLDER_CONFIG env var  >  built-in defaults
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from scaffolder.core.models.config import ScaffolderConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SCAFFOLDER_CONFIG"


class ConfigError(Exception):
    """Raised when scaffolder configuration is invalid or missing."""


def resolve_config_path(path: Path | None = None) -> Path | None:
    """Return the explicit path, else the env var path, else None."""
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else None


def load_config(path: Path | None = None) -> ScaffolderConfig:
    """Load and validate scaffolder configuration.

    Args:
        path: Explicit path to a YAML config. If None, falls back to
            ``SCAFFOLDER_CONFIG``, then to defaults.

    Returns:
        Validated ScaffolderConfig.

    Raises:
        ConfigError: If a named file is missing or invalid.
    """
    path = resolve_config_path(path)
    if path is None:
        logger.debug("No config file — using defaults")
        return ScaffolderConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = ScaffolderConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid scaffolder configuration: {e}") from e

    logger.info("Loaded config from %s (%d templates)", path, len(config.templates))
    return config
