"""Pydantic configuration models for MealPlanner.

Defines the validated config structure using the versioned v1 format.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from mealplanner.constants import DEFAULT_ACCOUNT, DEFAULT_LOG_LEVEL, LOG_DIR
from mealplanner.credentials.kinds import REQUIRED_KINDS, CredentialKind


class VaultSettings(BaseModel):
    """Where credential records are kept."""

    backend: Literal["keyring", "file", "memory"] = Field(
        default="keyring",
        description="Vault backend: OS keyring, encrypted file, or in-memory.",
    )
    path: Optional[str] = Field(
        default=None,
        description="Encrypted secrets file (file backend only).",
    )
    account: str = Field(
        default=DEFAULT_ACCOUNT,
        min_length=1,
        description="Account name shared by every credential record.",
    )

    @model_validator(mode="after")
    def _path_only_for_file(self) -> "VaultSettings":
        if self.path is not None and self.backend != "file":
            raise ValueError("'path' is only valid with the 'file' vault backend")
        return self


class LoggingSettings(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = Field(
        default=DEFAULT_LOG_LEVEL.lower(),
    )
    dir: str = Field(default=LOG_DIR, min_length=1, description="Directory for log files.")

    @field_validator("level", mode="before")
    @classmethod
    def _lower_level(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v


class StatusSettings(BaseModel):
    """Which kinds the status indicator shows."""

    kinds: List[CredentialKind] = Field(default_factory=lambda: list(REQUIRED_KINDS))

    @field_validator("kinds", mode="before")
    @classmethod
    def _parse_kinds(cls, v: object) -> object:
        if not isinstance(v, list):
            return v
        return [CredentialKind.parse(item) if isinstance(item, str) else item for item in v]

    @field_validator("kinds")
    @classmethod
    def _non_empty_unique(cls, v: List[CredentialKind]) -> List[CredentialKind]:
        if not v:
            raise ValueError("At least one credential kind must be listed")
        return list(dict.fromkeys(v))


class MealPlannerConfig(BaseModel):
    """Top-level validated configuration for MealPlanner.

    Supports version ``"1"`` format::

        version: "1"
        vault: { backend: keyring }
        logging: { level: info, dir: logs }
        status: { kinds: [usda, claude] }
    """

    version: str = "1"
    vault: VaultSettings = Field(default_factory=VaultSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    status: StatusSettings = Field(default_factory=StatusSettings)

    @field_validator("version", mode="before")
    @classmethod
    def _known_version(cls, v: object) -> str:
        v = str(v)
        if v != "1":
            raise ValueError(f"Unsupported config version '{v}' (expected '1')")
        return v
