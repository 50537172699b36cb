"""Credential store — high-level API over a :class:`SecretVault`.

Every operation answers with a plain ``bool`` or ``Optional[str]``:
vault failures are logged and collapsed into "not available".  Callers
that need to tell a failing vault apart from a missing key use
:meth:`CredentialStore.lookup`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from mealplanner.constants import DEFAULT_ACCOUNT, DEMO_MODE_SENTINEL
from mealplanner.display.logging_config import secret_redaction_filter
from mealplanner.errors import VaultError

from .kinds import CredentialKind
from .vaults import SecretVault, create_vault

if TYPE_CHECKING:
    from mealplanner.config.schema import VaultSettings

logger = logging.getLogger(__name__)


def _register_secret(value: str) -> None:
    if value != DEMO_MODE_SENTINEL:
        secret_redaction_filter.register(value)


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class CredentialLookup:
    """Outcome of a single vault read, with failures kept distinct."""

    kind: CredentialKind
    status: LookupStatus
    value: Optional[str] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


class CredentialStore:
    """Stores one secret per :class:`CredentialKind`.

    Parameters
    ----------
    vault:
        Backend holding the records.
    account:
        Account name shared by all records; the kind selects the namespace.
    """

    def __init__(self, vault: SecretVault, *, account: str = DEFAULT_ACCOUNT) -> None:
        self._vault = vault
        self._account = account

    @property
    def vault(self) -> SecretVault:
        return self._vault

    @property
    def account(self) -> str:
        return self._account

    # ── Core operations ──────────────────────────────────────────────

    def store(self, kind: CredentialKind, value: str) -> bool:
        """Replace the record for *kind* with *value*.

        Empty values and text that cannot be encoded as UTF-8 are rejected
        without touching the vault.  The old
        record is deleted and the new one added; if the add fails, the old
        payload is put back so the replace either happens or leaves the
        previous value in place.
        """
        if not value:
            logger.warning("Refusing to store an empty value for '%s'", kind.short_name)
            return False

        try:
            payload = value.encode("utf-8")
        except UnicodeEncodeError:
            logger.warning("Refusing to store non-encodable text for '%s'", kind.short_name)
            return False

        namespace = kind.namespace
        try:
            previous = self._vault.query(namespace, self._account)
        except VaultError as exc:
            logger.debug("Could not read previous '%s' record: %s", kind.short_name, exc)
            previous = None

        try:
            self._vault.delete(namespace, self._account)
            self._vault.add(namespace, self._account, payload)
        except VaultError as exc:
            logger.error("Storing credential '%s' failed: %s", kind.short_name, exc)
            if previous is not None:
                self._restore(kind, previous)
            return False

        _register_secret(value)
        # nosemgrep: python-logger-credential-disclosure (logs kind, not value)
        logger.info(
            "Credential '%s' stored via %s vault", kind.short_name, self._vault.backend_name
        )
        return True

    def _restore(self, kind: CredentialKind, previous: bytes) -> None:
        try:
            if self._vault.query(kind.namespace, self._account) is None:
                self._vault.add(kind.namespace, self._account, previous)
                logger.warning(
                    "Restored previous '%s' credential after failed replace", kind.short_name
                )
        except VaultError as exc:
            logger.error("Could not restore previous '%s' credential: %s", kind.short_name, exc)

    def lookup(self, kind: CredentialKind) -> CredentialLookup:
        """Read *kind* and report found / not found / error separately."""
        try:
            payload = self._vault.query(kind.namespace, self._account)
        except VaultError as exc:
            logger.warning("Reading credential '%s' failed: %s", kind.short_name, exc)
            return CredentialLookup(kind, LookupStatus.ERROR, error=str(exc))

        if payload is None:
            return CredentialLookup(kind, LookupStatus.NOT_FOUND)

        try:
            value = payload.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Credential '%s' is not valid UTF-8 text", kind.short_name)
            return CredentialLookup(kind, LookupStatus.ERROR, error="record is not UTF-8 text")

        _register_secret(value)
        return CredentialLookup(kind, LookupStatus.FOUND, value=value)

    def retrieve(self, kind: CredentialKind) -> Optional[str]:
        """Return the stored text for *kind*, or ``None``."""
        return self.lookup(kind).value

    def exists(self, kind: CredentialKind) -> bool:
        return self.retrieve(kind) is not None

    def delete(self, kind: CredentialKind) -> bool:
        """Remove the record for *kind*.  Returns ``False`` if the vault failed."""
        try:
            self._vault.delete(kind.namespace, self._account)
        except VaultError as exc:
            logger.error("Deleting credential '%s' failed: %s", kind.short_name, exc)
            return False
        logger.info("Credential '%s' deleted", kind.short_name)
        return True

    # ── Sentinel-aware helpers ───────────────────────────────────────

    def is_demo_mode(self) -> bool:
        return self.retrieve(CredentialKind.USDA) == DEMO_MODE_SENTINEL

    def set_demo_mode(self) -> bool:
        """Mark the USDA key as deliberately unconfigured."""
        return self.store(CredentialKind.USDA, DEMO_MODE_SENTINEL)

    def is_configured(self, kind: CredentialKind) -> bool:
        """True when *kind* holds a usable key.

        Unlike :meth:`exists`, the demo-mode sentinel counts as
        unconfigured for the USDA kind.
        """
        value = self.retrieve(kind)
        if not value:
            return False
        if kind is CredentialKind.USDA and value == DEMO_MODE_SENTINEL:
            return False
        return True

    @property
    def usda_api_key(self) -> Optional[str]:
        key = self.retrieve(CredentialKind.USDA)
        return None if key == DEMO_MODE_SENTINEL else key

    @property
    def claude_api_key(self) -> Optional[str]:
        return self.retrieve(CredentialKind.CLAUDE)

    @property
    def openai_api_key(self) -> Optional[str]:
        return self.retrieve(CredentialKind.OPENAI)

    @property
    def huggingface_api_key(self) -> Optional[str]:
        return self.retrieve(CredentialKind.HUGGINGFACE)

    def clear_all(self) -> None:
        """Delete every known credential.  Failures are logged, not raised."""
        for kind in CredentialKind:
            self.delete(kind)

    @classmethod
    def from_config(cls, settings: "VaultSettings") -> "CredentialStore":
        """Create a store from the ``vault`` config section."""
        vault = create_vault(settings.backend, path=settings.path)
        logger.debug("Using %s vault (account '%s')", vault.backend_name, settings.account)
        return cls(vault, account=settings.account)
