"""Configuration management for kontrolle.

Handles loading of YAML authorization files and parsing them into the
options consumed by the index builder.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..errors import ConfigError
from .settings import get_settings


@dataclass
class KontrolleOptions:
    """Top-level authorization options."""

    roles: Union[List[str], Dict[str, str]] = field(default_factory=list)
    permissions: Union[Dict[str, Any], List[Dict[str, Any]]] = field(
        default_factory=dict
    )
    features: Union[Dict[str, Any], List[Dict[str, Any]]] = field(
        default_factory=dict
    )
    role_features: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)
    delimiter: str = ":"


def parse_options(config_dict: Dict[str, Any]) -> KontrolleOptions:
    """Parse the authorization configuration dictionary.

    Sections that are absent or empty become empty containers. The
    delimiter falls back to the ``KONTROLLE_DELIMITER`` setting.

    Args:
        config_dict: Authorization configuration dictionary

    Returns:
        KontrolleOptions instance

    Raises:
        ConfigError: If the delimiter is empty
    """
    delimiter = config_dict.get("delimiter")
    if delimiter is None:
        delimiter = get_settings().delimiter
    if not delimiter:
        raise ConfigError("Delimiter is not defined")

    return KontrolleOptions(
        roles=config_dict.get("roles") or [],
        permissions=config_dict.get("permissions") or {},
        features=config_dict.get("features") or {},
        role_features=config_dict.get("role_features") or {},
        delimiter=delimiter,
    )


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load authorization configuration from a YAML file.

    Args:
        config_path: Path to configuration file, defaults to the
            ``KONTROLLE_CONFIG_PATH`` setting

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If no path is given or the root is not a mapping
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = get_settings().config_path
    if not config_path:
        raise ConfigError("No configuration path given")

    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise ConfigError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration strings."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_options(config_path: Optional[str] = None) -> KontrolleOptions:
    """Load and parse configuration into typed options.

    Args:
        config_path: Path to configuration file

    Returns:
        KontrolleOptions instance
    """
    return parse_options(load_config(config_path))
