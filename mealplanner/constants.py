"""Shared constants for MealPlanner."""

APP_NAME = "MealPlanner"
APP_VERSION = "0.1.0"

# Vault layout
DEFAULT_ACCOUNT = "api_key"
DEMO_MODE_SENTINEL = "DEMO_MODE"
DEFAULT_SECRETS_FILE = "secrets.enc"
SECRET_KEY_ENV = "MEALPLANNER_SECRET_KEY"

# Environment variables read by the key migration flow
ENV_KEY_PREFIX = "MEALPLANNER_"
ENV_KEY_SUFFIX = "_API_KEY"

# Config
CONFIG_ENV = "MEALPLANNER_CONFIG"

# Logging defaults
LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"
