# installer/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the installer.

Settings are resolved once per run with this order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (CI, SKIP_USER_PROMPT, SKIP_SEED_PROMPT, ...)
3. YAML Configuration File (optional, in the project root)
4. Command-Line Arguments

The resulting AppSettings is passed explicitly to every component.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

CONFIG_FILE_DEFAULT = "installer.yaml"


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively update `source` with `overrides`.

    Nested dictionaries are merged key by key. A None override never replaces
    an existing value, so unset CLI options leave lower layers untouched.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
    return source


def _read_yaml_config(
    yaml_config_path: Path, logger_to_use: logging.Logger
) -> Dict[str, Any]:
    if not yaml_config_path.is_file():
        logger_to_use.debug(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}
    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except OSError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}
    logger_to_use.debug(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def load_app_settings(
    cli_overrides: Optional[Dict[str, Any]] = None,
    config_file_path: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Load installer settings.

    Args:
        cli_overrides: Values from command-line options. None values are ignored.
        config_file_path: YAML file to read. Relative paths are resolved
            against the project root (from the CLI overrides, the environment,
            or the current directory). Defaults to ``installer.yaml``.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.
    """
    logger_to_use = current_logger if current_logger else module_logger
    cli_overrides = cli_overrides or {}

    # Defaults < environment variables.
    settings_after_env_and_defaults = AppSettings()
    current_values_dict = settings_after_env_and_defaults.model_dump()

    project_root = Path(
        cli_overrides.get("project_root") or settings_after_env_and_defaults.project_root
    )
    yaml_config_path = Path(config_file_path or CONFIG_FILE_DEFAULT)
    if not yaml_config_path.is_absolute():
        yaml_config_path = project_root / yaml_config_path

    current_values_dict = _deep_update(
        current_values_dict, _read_yaml_config(yaml_config_path, logger_to_use)
    )
    current_values_dict = _deep_update(current_values_dict, dict(cli_overrides))

    return AppSettings(**current_values_dict)
