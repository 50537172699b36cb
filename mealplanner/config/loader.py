"""Configuration file loading and validation.

Loads a YAML configuration file, expands ``${ENV_VAR}`` placeholders,
and validates against Pydantic models defined in :mod:`schema`.
Without a config file the built-in defaults apply (OS keyring vault).
"""

import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from mealplanner.config.expand import expand_env_vars
from mealplanner.config.schema import MealPlannerConfig
from mealplanner.constants import CONFIG_ENV
from mealplanner.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Recognised config file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})

# Config file search order (first match wins)
_CONFIG_SEARCH_ORDER = ("config.yaml", "config.yml")


def find_config_file(explicit: Optional[str] = None) -> Optional[str]:
    """Resolve the config path: explicit argument, then ``MEALPLANNER_CONFIG``,
    then ``config.yaml``/``config.yml`` in the working directory.

    Returns ``None`` when nothing is found (defaults apply).
    """
    if explicit:
        return explicit
    from_env = os.environ.get(CONFIG_ENV)
    if from_env:
        return from_env
    for name in _CONFIG_SEARCH_ORDER:
        candidate = os.path.join(os.getcwd(), name)
        if os.path.isfile(candidate):
            return candidate
    return None


def _read_config_file(cfg_fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML config file from *cfg_fpath*.

    Raises :class:`ConfigurationError` on I/O or parse errors.
    """
    ext = os.path.splitext(cfg_fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported config file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(cfg_fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except Exception as exc:
        raise ConfigurationError(f"Error reading configuration file: {cfg_fpath}\n  {exc}") from exc

    if raw_data is None:
        return {}
    if not isinstance(raw_data, dict):
        raise ConfigurationError(
            "Top-level configuration content must be a YAML mapping (dictionary)."
        )
    return raw_data


def _format_validation_errors(exc: ValidationError) -> str:
    """Format Pydantic validation errors into a readable multi-line string."""
    lines: List[str] = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        lines.append(f"  • {loc}: {err['msg']}")
    return "\n".join(lines)


def load_config(cfg_fpath: Optional[str] = None) -> MealPlannerConfig:
    """Load, expand and validate the configuration.

    Steps:
        1. Resolve the file via :func:`find_config_file`
        2. Read YAML
        3. Expand ``${VAR}`` environment variable references
        4. Validate against :class:`MealPlannerConfig` (Pydantic)

    Raises:
        ConfigurationError: On a missing explicit file, I/O errors, parse
            errors, or validation failures (all errors reported at once).
    """
    path = find_config_file(cfg_fpath)
    if path is None:
        logger.debug("No configuration file found; using defaults.")
        return MealPlannerConfig()

    logger.debug("Loading configuration file: %s", path)
    if not os.path.exists(path):
        raise ConfigurationError(f"Configuration file does not exist: {path}")

    raw_data = expand_env_vars(_read_config_file(path))

    try:
        config = MealPlannerConfig.model_validate(raw_data)
    except ValidationError as exc:
        error_summary = _format_validation_errors(exc)
        raise ConfigurationError(
            f"Configuration validation failed ({len(exc.errors())} error(s)):\n" f"{error_summary}"
        ) from exc

    logger.info(
        "Configuration '%s' loaded (v%s). Vault backend: %s.",
        path,
        config.version,
        config.vault.backend,
    )
    return config
