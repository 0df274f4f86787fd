"""Configuration package."""

from fintrack.config.settings import (
    AppSettings,
    GatewaySettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "GatewaySettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
