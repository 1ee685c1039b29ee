"""Configuration manager with hierarchy: .env → environment → defaults.

Usage:
    from lackeys.lib.config_manager import config

    level = config.get("LACKEYS_LOG_LEVEL")
    events = config.get_list("LACKEYS_CALLBACK_EVENTS")
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from lackeys.lib.defaults import DEFAULTS, get_default

logger = logging.getLogger(__name__)

# Files that mark the root of a project checkout
ROOT_MARKERS = (".git", "pyproject.toml")


def find_project_root(start_path: Optional[Path] = None) -> Path:
    """Walk up directory tree to find the project root.

    Args:
        start_path: Starting directory (defaults to cwd)

    Returns:
        Path to the first directory containing one of ROOT_MARKERS

    Raises:
        FileNotFoundError: If no marker is found in any parent
    """
    current = start_path or Path.cwd()
    current = current.resolve()

    while current != current.parent:
        if any((current / marker).exists() for marker in ROOT_MARKERS):
            return current
        current = current.parent

    raise FileNotFoundError("No project root found in any parent directory")


def _coerce_type(value: str, default: Any) -> Any:
    """Coerce string value to match the type of the default.

    Args:
        value: String value from the environment
        default: Default value (determines target type)

    Returns:
        Value coerced to appropriate type
    """
    if default is None:
        return value

    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes", "on")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return default
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError:
            return default
    return value


class ConfigManager:
    """Resolves configuration with .env → environment → defaults.

    The manager loads .env on initialization. Values in .env override
    the process environment, which overrides DEFAULTS.
    """

    def __init__(self, start_path: Optional[Path] = None):
        """Initialize the config manager and load .env."""
        self._start_path = start_path
        self._env_loaded = False
        self._load_env()

    def _load_env(self) -> None:
        """Load .env file from the project root."""
        if self._env_loaded:
            return

        try:
            root = find_project_root(self._start_path)
            env_path = root / ".env"
            if env_path.exists():
                load_dotenv(dotenv_path=env_path, override=True)
                logger.debug(f"Loaded .env from {env_path}")
            else:
                logger.debug(f"No .env file found at {env_path}")
        except FileNotFoundError:
            logger.debug("Could not find project root, .env not loaded")

        self._env_loaded = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value.

        Args:
            key: Configuration key
            default: Override default (uses DEFAULTS if not provided)

        Returns:
            Configuration value
        """
        env_value = os.getenv(key)
        if env_value is not None:
            default_val = default if default is not None else get_default(key)
            return _coerce_type(env_value, default_val)

        if default is not None:
            return default
        return get_default(key)

    def get_list(self, key: str, default: Any = None) -> list[str]:
        """Get a comma-separated config value as a list of stripped items."""
        raw = self.get(key, default)
        if not raw:
            return []
        if isinstance(raw, (list, tuple)):
            return [str(item).strip() for item in raw if str(item).strip()]
        return [item.strip() for item in str(raw).split(",") if item.strip()]

    def get_all(self) -> dict[str, Any]:
        """Get all known configuration values.

        Returns:
            Dictionary of all config keys and their resolved values
        """
        return {key: self.get(key) for key in DEFAULTS}


# Singleton instance
config = ConfigManager()
