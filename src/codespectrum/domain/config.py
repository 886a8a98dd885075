from __future__ import annotations

"""
Configuration Domain Management.

Defines the default analysis settings and persists user overrides as JSON
in the application data directory. Loaded values are always merged over the
defaults so newly introduced keys are present.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from codespectrum.domain.constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    default_source_extensions,
)
from codespectrum.infra.fs import get_user_data_dir, write_text_file

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
DEFAULT_MAX_NODE_COUNT = 256
DEFAULT_MAX_WORKERS = 4


def get_default_config_path() -> str:
    """Location of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default analysis configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Input selection
        "input_path": os.getcwd(),
        "extensions": default_source_extensions(),
        "include_patterns": list(DEFAULT_INCLUDE_PATTERNS),
        "exclude_patterns": list(DEFAULT_EXCLUDE_PATTERNS),
        "respect_gitignore": False,

        # Tree shaping
        "max_node_count": DEFAULT_MAX_NODE_COUNT,
        "max_workers": DEFAULT_MAX_WORKERS,

        # Output
        "output_path": "",
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration from disk, merged over the defaults.

    A missing file yields the defaults; an unreadable or malformed file is
    logged and also yields the defaults.

    Args:
        path: Config file to read. Defaults to the user data directory file.

    Returns:
        Dict[str, Any]: The effective configuration.
    """
    config_path = path or get_default_config_path()
    config = get_default_config()

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at {config_path}. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {config_path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    config.update(data)
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Persist the configuration as JSON.

    Args:
        config: The configuration dictionary to save.
        path: Target file. Defaults to the user data directory file.
    """
    config_path = path or get_default_config_path()
    try:
        write_text_file(config_path, json.dumps(config, ensure_ascii=False, indent=4))
        logger.debug(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
