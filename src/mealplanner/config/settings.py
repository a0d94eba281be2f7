"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".mealplanner"


def _default_config_path() -> Path:
    return _default_config_dir() / "config.yaml"


@dataclass
class SolverConfig:
    """Optimization solver configuration."""

    max_grams: int = 65535  # upper bound for products without a high bound
    max_unit_count: int = 65535
    default_day_name: str = "Day1"
    presolve: bool = True
    time_limit: Optional[float] = None  # seconds, None = no limit
    integrality_tolerance: float = 1e-6


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class Settings:
    """Main application settings."""

    solver: SolverConfig = field(default_factory=SolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.mealplanner/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse solver config
        if "solver" in data:
            solver_data = data["solver"] or {}
            if "max_grams" in solver_data:
                settings.solver.max_grams = int(solver_data["max_grams"])
            if "max_unit_count" in solver_data:
                settings.solver.max_unit_count = int(solver_data["max_unit_count"])
            if "default_day_name" in solver_data:
                settings.solver.default_day_name = str(solver_data["default_day_name"])
            if "presolve" in solver_data:
                settings.solver.presolve = bool(solver_data["presolve"])
            if "time_limit" in solver_data:
                limit = solver_data["time_limit"]
                settings.solver.time_limit = float(limit) if limit is not None else None
            if "integrality_tolerance" in solver_data:
                settings.solver.integrality_tolerance = float(
                    solver_data["integrality_tolerance"]
                )

        # Parse logging config
        if "logging" in data:
            log_data = data["logging"] or {}
            if "level" in log_data:
                settings.logging.level = str(log_data["level"]).upper()

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.mealplanner/config.yaml
        """
        if config_path is None:
            config_path = _default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "solver": {
                "max_grams": self.solver.max_grams,
                "max_unit_count": self.solver.max_unit_count,
                "default_day_name": self.solver.default_day_name,
                "presolve": self.solver.presolve,
                "time_limit": self.solver.time_limit,
                "integrality_tolerance": self.solver.integrality_tolerance,
            },
            "logging": {
                "level": self.logging.level,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
