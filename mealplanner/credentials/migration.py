"""One-time key migration into the credential store.

Keys that used to live in source code or shell profiles are collected
from environment variables (``MEALPLANNER_<KIND>_API_KEY``) or from a
small YAML key file and written to the vault in one pass::

    usda: abc123
    claude: sk-ant-...
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import yaml

from mealplanner.errors import ConfigurationError

from .kinds import REQUIRED_KINDS, CredentialKind
from .store import CredentialStore

logger = logging.getLogger(__name__)


@dataclass
class MigrationReport:
    """Which kinds were stored, skipped (empty input), or failed."""

    stored: List[CredentialKind] = field(default_factory=list)
    skipped: List[CredentialKind] = field(default_factory=list)
    failed: List[CredentialKind] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def collect_env_keys(environ: Optional[Mapping[str, str]] = None) -> Dict[CredentialKind, str]:
    """Return the non-empty per-kind keys found in *environ* (default: ``os.environ``)."""
    env = os.environ if environ is None else environ
    keys: Dict[CredentialKind, str] = {}
    for kind in CredentialKind:
        value = env.get(kind.env_var, "").strip()
        if value:
            keys[kind] = value
    return keys


def load_key_file(path: str) -> Dict[CredentialKind, str]:
    """Read a YAML mapping of kind name → key.

    Raises :class:`ConfigurationError` on I/O or parse errors, a
    non-mapping document, or an unknown kind name.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Error reading key file: {path}\n  {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Key file {path} must be a YAML mapping of kind name to key.")

    keys: Dict[CredentialKind, str] = {}
    for name, value in raw.items():
        try:
            kind = CredentialKind.parse(str(name))
        except ValueError as exc:
            raise ConfigurationError(f"Key file {path}: {exc}") from exc
        keys[kind] = "" if value is None else str(value).strip()
    return keys


def migrate_keys(store: CredentialStore, keys: Mapping[CredentialKind, str]) -> MigrationReport:
    """Store every non-empty key in *keys* and report the outcome per kind."""
    report = MigrationReport()
    for kind, value in keys.items():
        if not value:
            report.skipped.append(kind)
            continue
        if store.store(kind, value):
            report.stored.append(kind)
        else:
            report.failed.append(kind)

    logger.info(
        "Key migration finished: %d stored, %d skipped, %d failed",
        len(report.stored),
        len(report.skipped),
        len(report.failed),
    )
    return report


def is_setup_complete(store: CredentialStore) -> bool:
    """True once the USDA and Claude keys are both configured."""
    return all(store.is_configured(kind) for kind in REQUIRED_KINDS)
