# src/nerdfetch/config.py

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import platformdirs
import yaml

from nerdfetch.constants import (
    APP_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_FONTS_DIR_NAME,
    FONT_FORMATS,
)
from nerdfetch.exceptions import ConfigFileError
from nerdfetch.log_utils import logger

CONFIG_DIR = platformdirs.user_config_dir(APP_NAME)
CONFIG_FILE = os.path.join(CONFIG_DIR, CONFIG_FILE_NAME)

DEFAULT_CONFIG: Dict[str, Any] = {
    "FONTS_DIR": DEFAULT_FONTS_DIR_NAME,
    "EXTRACT": False,
    "FORMATS": [],
    "LOG_LEVEL": None,
    "LOG_TO_FILE": False,
}


def _normalize_formats(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigFileError(
            "Invalid FORMATS value", details=f"expected a list, got {value!r}"
        )
    formats = []
    for item in value:
        fmt = str(item).strip().lower().lstrip(".")
        if fmt not in FONT_FORMATS:
            logger.warning(f"Ignoring unsupported font format in config: {item}")
            continue
        if fmt not in formats:
            formats.append(fmt)
    return formats


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the nerdfetch YAML configuration merged over the defaults.

    A missing file is not an error: the defaults are returned. Unknown keys are
    dropped so later code only sees the keys listed in DEFAULT_CONFIG.

    Parameters:
        config_file (str | None): Path to the YAML file; defaults to CONFIG_FILE.

    Returns:
        dict: Configuration with every key from DEFAULT_CONFIG present.

    Raises:
        ConfigFileError: If the file cannot be read, is not valid YAML, or is not a mapping.
    """
    path = config_file or CONFIG_FILE
    config = dict(DEFAULT_CONFIG)
    if not os.path.exists(path):
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigFileError(f"Could not read configuration {path}", details=str(e))

    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ConfigFileError(
            f"Configuration {path} must be a mapping",
            details=f"got {type(loaded).__name__}",
        )

    for key in DEFAULT_CONFIG:
        if key in loaded:
            config[key] = loaded[key]

    config["EXTRACT"] = bool(config["EXTRACT"])
    config["LOG_TO_FILE"] = bool(config["LOG_TO_FILE"])
    config["FORMATS"] = _normalize_formats(config["FORMATS"])
    if not config["FONTS_DIR"]:
        config["FONTS_DIR"] = DEFAULT_FONTS_DIR_NAME
    return config


def resolve_fonts_dir(fonts_dir: Optional[str]) -> Path:
    """
    Resolve the target fonts directory.

    Relative paths (and `~` prefixes) are anchored at the user's home directory;
    absolute paths are used as given.
    """
    raw = os.path.expanduser(str(fonts_dir or DEFAULT_FONTS_DIR_NAME))
    path = Path(raw)
    if not path.is_absolute():
        path = Path.home() / path
    return path


def get_log_dir() -> Path:
    return Path(platformdirs.user_log_dir(APP_NAME))
