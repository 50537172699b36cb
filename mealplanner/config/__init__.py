"""Configuration loading and validation for MealPlanner."""

from mealplanner.config.expand import expand_env_vars
from mealplanner.config.loader import find_config_file, load_config
from mealplanner.config.schema import (
    LoggingSettings,
    MealPlannerConfig,
    StatusSettings,
    VaultSettings,
)

__all__ = [
    "LoggingSettings",
    "MealPlannerConfig",
    "StatusSettings",
    "VaultSettings",
    "expand_env_vars",
    "find_config_file",
    "load_config",
]
