"""Configuration management for archiver."""
import os
from pathlib import Path
import yaml
from typing import Dict, Any, Optional

from .. import constants
from ..utils.exceptions import ConfigValidationError

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')

def init_paths(base_path: Optional[Path] = None) -> None:
    """Initialize global paths for archiver.

    Args:
        base_path: Optional custom base path. If None, uses $ARCHIVER_HOME
            or ~/.config/archiver

    Raises:
        ValueError: If base_path does not exist and cannot be created
    """
    if base_path is not None and not (base_path.exists() or base_path.parent.exists()):
        raise ValueError(f"Base path {base_path} does not exist and cannot be created")

    if base_path is None and os.environ.get("ARCHIVER_HOME"):
        base_path = Path(os.environ["ARCHIVER_HOME"])

    constants.ARCHIVER_HOME = base_path or Path.home() / ".config" / "archiver"
    constants.ARCHIVER_CONFIG_FILE = constants.ARCHIVER_HOME / "config.yaml"

def _ensure_config_dir() -> None:
    """Ensure configuration directory exists.

    Raises:
        RuntimeError: If directory cannot be created
    """
    try:
        constants.ARCHIVER_HOME.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"Failed to create config directory {constants.ARCHIVER_HOME}: {e}")

def load_global_config() -> Dict[str, Any]:
    """Load global configuration from YAML file, filling in defaults."""
    config = constants.DEFAULT_CONFIG.copy()
    if not constants.ARCHIVER_CONFIG_FILE.exists():
        return config

    try:
        with open(constants.ARCHIVER_CONFIG_FILE, 'r') as f:
            user_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise RuntimeError(f"Failed to load config file {constants.ARCHIVER_CONFIG_FILE}: {e}")

    if not isinstance(user_config, dict):
        raise ConfigValidationError(f"Config file {constants.ARCHIVER_CONFIG_FILE} must contain a mapping")
    config.update(user_config)
    return config

def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to YAML file.

    Args:
        config: Configuration dictionary to save

    Raises:
        RuntimeError: If config cannot be saved
    """
    _ensure_config_dir()
    try:
        with open(constants.ARCHIVER_CONFIG_FILE, 'w') as f:
            yaml.dump(config, f)
    except (yaml.YAMLError, OSError) as e:
        raise RuntimeError(f"Failed to save config file {constants.ARCHIVER_CONFIG_FILE}: {e}")

def coerce_value(key: str, raw: str) -> Any:
    """Convert a string value to the type of the key's default.

    Raises:
        ConfigValidationError: If the key is unknown or the value does not fit
    """
    if key not in constants.DEFAULT_CONFIG:
        raise ConfigValidationError(
            f"Unknown config key '{key}'. Valid keys: {', '.join(constants.DEFAULT_CONFIG)}"
        )

    default = constants.DEFAULT_CONFIG[key]
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigValidationError(f"Invalid boolean for '{key}': {raw}")
    if isinstance(default, int):
        try:
            value = int(raw)
        except ValueError:
            raise ConfigValidationError(f"Invalid integer for '{key}': {raw}")
        if value < 0:
            raise ConfigValidationError(f"'{key}' must not be negative")
        return value
    if key == "log_level":
        level = raw.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"):
            raise ConfigValidationError(f"Invalid log level: {raw}")
        return level
    return raw

def set_config_value(key: str, raw: str) -> Any:
    """Validate, store and return a single global config value."""
    value = coerce_value(key, raw)
    config = load_global_config()
    config[key] = value
    save_global_config(config)
    return value
