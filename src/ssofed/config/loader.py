"""Configuration loader for ssofed.

Loads a YAML file into a :class:`MappingConfigSource`. String values may refer to
environment variables with ``${VAR_NAME}``; references are resolved once, at
load time.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from .source import MappingConfigSource

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\${([A-Za-z0-9_]+)}")


def load_config_source(config_path: Path | None = None) -> MappingConfigSource:
    """Load configuration from a YAML file.

    Args:
        config_path: Optional path to the YAML file.
                    If not provided, looks for:
                    1. SSOFED_CONFIG environment variable
                    2. ~/.ssofed/config.yaml
                    3. ./config.yaml

    Returns:
        MappingConfigSource over the parsed document

    Raises:
        FileNotFoundError: If an explicitly requested config file doesn't exist
        ValueError: If the file is not valid YAML, its root is not a mapping, or
            it references an undefined environment variable
    """
    if config_path is None:
        env_path = os.environ.get("SSOFED_CONFIG")
        if env_path:
            config_path = Path(env_path)
        else:
            candidates = [Path.home() / ".ssofed" / "config.yaml", Path.cwd() / "config.yaml"]
            for candidate in candidates:
                if candidate.exists():
                    config_path = candidate
                    break

            if config_path is None:
                logger.info("No config file found, using empty configuration")
                return MappingConfigSource()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found at {config_path}")

    logger.debug(f"Loading config from: {config_path}")

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML config file {config_path}: {e}") from e

    if not raw_config:
        logger.info("Empty config file, using empty configuration")
        return MappingConfigSource()

    if not isinstance(raw_config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping at the top level")

    return MappingConfigSource(_interpolate(raw_config))


def _interpolate(value: Any) -> Any:
    """Recursively replace ``${VAR}`` references in string values."""
    if isinstance(value, dict):
        return {key: _interpolate(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_interpolate(item) for item in value]
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_resolve_env, value)
    return value


def _resolve_env(match: re.Match[str]) -> str:
    var_name = match.group(1)
    value = os.environ.get(var_name)
    if value is None:
        raise ValueError(f"Environment variable not found: {var_name}")
    return value
