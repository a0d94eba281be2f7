"""Configuration management."""

from mealplanner.config.settings import (
    LoggingConfig,
    Settings,
    SolverConfig,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "SolverConfig",
    "LoggingConfig",
    "get_settings",
    "reload_settings",
]
