"""Filesystem locations for Techlife configuration."""

import os
from pathlib import Path

import platformdirs

APP_NAME = "techlife"
CONFIG_DIR_ENV = "TECHLIFE_CONFIG_DIR"


def get_config_dir() -> Path:
    """Return the configuration directory.

    ``TECHLIFE_CONFIG_DIR`` wins over the platform default.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path(platformdirs.user_config_dir(APP_NAME))


def get_config_file() -> Path:
    return get_config_dir() / "config.yaml"
