"""Logging configuration setup."""

import copy
import logging
import logging.config
import os
import re
import sys
from datetime import datetime
from typing import Set, Tuple  # noqa: UP035

from mealplanner.constants import LOG_DIR

# ── Secret redaction filter ──────────────────────────────────────────────

_REDACTED = "***REDACTED***"


class SecretRedactionFilter(logging.Filter):
    """Logging filter that replaces known credential values with a placeholder.

    The credential store calls :meth:`register` for every value it stores
    or reads.  Thread-safe because CPython's GIL protects set reads against
    concurrent adds.
    """

    def __init__(self) -> None:
        super().__init__()
        self._secrets: Set[str] = set()
        self._pattern: re.Pattern[str] | None = None

    def register(self, value: str) -> None:
        """Register a secret value for redaction."""
        if value and len(value) >= 4 and value not in self._secrets:  # skip trivially short values
            self._secrets.add(value)
            # Rebuild regex pattern with longest-first ordering
            escaped = sorted((re.escape(s) for s in self._secrets), key=len, reverse=True)
            self._pattern = re.compile("|".join(escaped))

    def clear(self) -> None:
        self._secrets.clear()
        self._pattern = None

    def redact(self, text: str) -> str:
        if self._pattern is None:
            return text
        return self._pattern.sub(_REDACTED, text)

    def filter(self, record: logging.LogRecord) -> bool:
        if self._pattern is not None:
            if isinstance(record.msg, str):
                record.msg = self._pattern.sub(_REDACTED, record.msg)
            if record.args:
                if isinstance(record.args, dict):
                    record.args = {
                        k: self._pattern.sub(_REDACTED, v) if isinstance(v, str) else v
                        for k, v in record.args.items()
                    }
                elif isinstance(record.args, tuple):
                    record.args = tuple(
                        self._pattern.sub(_REDACTED, a) if isinstance(a, str) else a
                        for a in record.args
                    )
        return True


# Module-level singleton so the credential store can register values.
secret_redaction_filter = SecretRedactionFilter()

BASE_LOG_CFG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple_file": {
            "format": "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "file_handler": {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "simple_file",
            "filename": "temp_log_name.log",
            "encoding": "utf-8",
        },
    },
    "loggers": {
        "mealplanner": {
            "handlers": ["file_handler"],
            "propagate": False,
            "level": "INFO",
        },
        "keyring": {
            "handlers": ["file_handler"],
            "propagate": False,
            "level": "WARNING",
        },
    },
    "root": {
        "handlers": ["file_handler"],
        "level": "WARNING",
    },
}


def setup_logging(log_lvl_str: str, *, log_dir: str = LOG_DIR) -> Tuple[str, str]:
    """
    Set up the logging system.

    Uses a timestamped dynamic filename under *log_dir*.

    Args:
        log_lvl_str: The desired log level string (e.g., 'debug', 'info').
        log_dir: Directory for the log file (created if missing).

    Returns:
        A tuple of (log_file_path, validated_log_level).
    """
    log_lvl_valid = log_lvl_str.upper()
    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if log_lvl_valid not in valid_levels:
        print(f"Warning: invalid log level '{log_lvl_str}'. Using 'INFO'.", file=sys.stderr)
        log_lvl_valid = "INFO"

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    os.makedirs(log_dir, exist_ok=True)
    log_fpath = os.path.join(log_dir, f"mealplanner_{ts}_{log_lvl_valid}.log")

    log_cfg: dict = copy.deepcopy(BASE_LOG_CFG)
    log_cfg["handlers"]["file_handler"]["filename"] = log_fpath
    log_cfg["loggers"]["mealplanner"]["level"] = log_lvl_valid
    log_cfg["loggers"]["keyring"]["level"] = "DEBUG" if log_lvl_valid == "DEBUG" else "WARNING"
    log_cfg["root"]["level"] = log_lvl_valid if log_lvl_valid == "DEBUG" else "WARNING"

    try:
        logging.config.dictConfig(log_cfg)
        # Attach secret redaction filter to all handlers
        for name in ("", "mealplanner", "keyring"):
            for handler in logging.getLogger(name).handlers:
                handler.addFilter(secret_redaction_filter)
    except Exception as e_log_cfg:
        print(f"Error applying logging configuration: {e_log_cfg}", file=sys.stderr)

    return log_fpath, log_lvl_valid
