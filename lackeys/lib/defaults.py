"""Default configuration values for lackeys.

All hardcoded defaults live here. The library is fully functional with
these defaults and no .env file.

Config hierarchy: .env → environment → these defaults
"""

from typing import Any

# =============================================================================
# Configuration Defaults
# =============================================================================

DEFAULTS: dict[str, Any] = {
    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    "LACKEYS_LOG_LEVEL": "INFO",
    "LACKEYS_LOG_FORMAT": "json",  # "json" or "text"

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------
    "LACKEYS_WARN_ON_REREGISTER": True,

    # -------------------------------------------------------------------------
    # Lifecycle events wired by RailsBase (comma-separated)
    # -------------------------------------------------------------------------
    "LACKEYS_CALLBACK_EVENTS": (
        "before_save,after_save,"
        "before_create,after_create,"
        "before_update,after_update,"
        "before_destroy,after_destroy"
    ),
}


# =============================================================================
# Config Categories (for display)
# =============================================================================

CONFIG_CATEGORIES = {
    "logging": [
        "LACKEYS_LOG_LEVEL",
        "LACKEYS_LOG_FORMAT",
    ],
    "registration": [
        "LACKEYS_WARN_ON_REREGISTER",
    ],
    "callbacks": [
        "LACKEYS_CALLBACK_EVENTS",
    ],
}


def get_default(key: str) -> Any:
    """Get the default value for a config key.

    Args:
        key: Configuration key

    Returns:
        Default value, or None if the key is unknown
    """
    return DEFAULTS.get(key)


def get_category(key: str) -> str:
    """Get the category a config key belongs to."""
    for category, keys in CONFIG_CATEGORIES.items():
        if key in keys:
            return category
    return "other"
