"""Credential storage for third-party API keys.

Keeps one secret per :class:`CredentialKind` in an injected
:class:`SecretVault` (the OS keyring by default).
"""

from mealplanner.credentials.kinds import CredentialKind
from mealplanner.credentials.store import CredentialLookup, CredentialStore, LookupStatus
from mealplanner.credentials.vaults import (
    FileVault,
    KeyringVault,
    MemoryVault,
    SecretVault,
    create_vault,
)

__all__ = [
    "CredentialKind",
    "CredentialLookup",
    "CredentialStore",
    "FileVault",
    "KeyringVault",
    "LookupStatus",
    "MemoryVault",
    "SecretVault",
    "create_vault",
]
