"""Secret vault backends — where credential records are actually kept.

Vaults implement a small record interface keyed by ``(namespace, account)``::

    class SecretVault:
        def add(self, namespace: str, account: str, payload: bytes) -> None: ...
        def delete(self, namespace: str, account: str) -> None: ...
        def query(self, namespace: str, account: str) -> Optional[bytes]: ...

Backend failures are raised as :class:`~mealplanner.errors.VaultError`;
a missing record is not a failure.

Built-in vaults:

* ``KeyringVault`` — OS credential vault (via ``keyring`` package)
* ``FileVault`` — Fernet-encrypted JSON file
* ``MemoryVault`` — in-process dict
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from mealplanner.constants import DEFAULT_SECRETS_FILE, SECRET_KEY_ENV
from mealplanner.errors import VaultError

logger = logging.getLogger(__name__)


class SecretVault(ABC):
    """Abstract base class for secret storage backends."""

    #: Short backend name used in config and log messages.
    backend_name = "abstract"

    @abstractmethod
    def add(self, namespace: str, account: str, payload: bytes) -> None:
        """Insert a record. Raises ``VaultError`` if the backend refuses."""

    @abstractmethod
    def delete(self, namespace: str, account: str) -> None:
        """Remove a record if present."""

    @abstractmethod
    def query(self, namespace: str, account: str) -> Optional[bytes]:
        """Return the record's payload, or ``None`` if not found."""


# ── In-memory vault ─────────────────────────────────────────────────────


class MemoryVault(SecretVault):
    """Keeps records in a dict for the lifetime of the process."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], bytes] = {}

    def add(self, namespace: str, account: str, payload: bytes) -> None:
        self._records[(namespace, account)] = bytes(payload)

    def delete(self, namespace: str, account: str) -> None:
        self._records.pop((namespace, account), None)

    def query(self, namespace: str, account: str) -> Optional[bytes]:
        return self._records.get((namespace, account))

    def __len__(self) -> int:
        return len(self._records)


# ── Fernet-encrypted file vault ─────────────────────────────────────────


class FileVault(SecretVault):
    """Stores records in a Fernet-encrypted JSON file.

    For hosts without a usable OS keyring.  The master key is read from the
    ``MEALPLANNER_SECRET_KEY`` environment variable.

    Parameters
    ----------
    path:
        Path to the encrypted secrets file.
    """

    backend_name = "file"

    def __init__(self, path: str = DEFAULT_SECRETS_FILE) -> None:
        self._path = path
        self._fernet: Optional[object] = None  # lazy

    @property
    def path(self) -> str:
        return self._path

    def _ensure_fernet(self) -> object:
        if self._fernet is not None:
            return self._fernet

        from cryptography.fernet import Fernet

        key = os.environ.get(SECRET_KEY_ENV)
        if not key:
            raise VaultError(
                f"{SECRET_KEY_ENV} environment variable must be set for the file vault."
            )
        try:
            self._fernet = Fernet(key.encode())
        except (ValueError, binascii.Error) as exc:
            raise VaultError(f"{SECRET_KEY_ENV} is not a valid Fernet key", orig_exc=exc) from exc
        return self._fernet

    def _load(self) -> Dict[str, Dict[str, str]]:
        if not os.path.exists(self._path):
            return {}
        fernet = self._ensure_fernet()
        try:
            with open(self._path, "rb") as f:
                encrypted = f.read()
            decrypted = fernet.decrypt(encrypted)  # type: ignore[union-attr]
            data = json.loads(decrypted)
        except Exception as exc:
            raise VaultError(
                f"Failed to load/decrypt secrets file {self._path}. "
                f"Check that {SECRET_KEY_ENV} is correct and the file is not corrupted.",
                orig_exc=exc,
            ) from exc
        if not isinstance(data, dict):
            raise VaultError(f"Secrets file {self._path} does not hold a JSON object")
        return data

    def _save(self, data: Dict[str, Dict[str, str]]) -> None:
        fernet = self._ensure_fernet()
        encrypted = fernet.encrypt(json.dumps(data).encode())  # type: ignore[union-attr]

        dir_name = os.path.dirname(os.path.abspath(self._path)) or "."
        try:
            fd, tmp_path = tempfile.mkstemp(dir=dir_name, prefix=".secrets_", suffix=".tmp")
        except OSError as exc:
            raise VaultError(f"Cannot write secrets file {self._path}", orig_exc=exc) from exc
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(encrypted)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path)
        except BaseException as exc:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            if isinstance(exc, OSError):
                raise VaultError(f"Cannot write secrets file {self._path}", orig_exc=exc) from exc
            raise

    def add(self, namespace: str, account: str, payload: bytes) -> None:
        data = self._load()
        data.setdefault(namespace, {})[account] = base64.b64encode(payload).decode("ascii")
        self._save(data)

    def delete(self, namespace: str, account: str) -> None:
        data = self._load()
        accounts = data.get(namespace)
        if not accounts or account not in accounts:
            return
        del accounts[account]
        if not accounts:
            del data[namespace]
        self._save(data)

    def query(self, namespace: str, account: str) -> Optional[bytes]:
        encoded = self._load().get(namespace, {}).get(account)
        if encoded is None:
            return None
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise VaultError("Corrupt record payload", namespace=namespace, orig_exc=exc) from exc


# ── OS keyring vault ────────────────────────────────────────────────────


class KeyringVault(SecretVault):
    """Uses the OS credential vault (macOS Keychain, Windows Credential
    Locker, Secret Service, etc.).

    The keyring service name is the record namespace and the keyring
    username is the account.  Keyring entries are text, so payloads must
    be UTF-8.  Which records are readable while the device is locked, and
    whether they sync, is decided by the platform backend; this class never
    copies records anywhere else.
    """

    backend_name = "keyring"

    def __init__(self) -> None:
        self._keyring: Optional[object] = None

    def _ensure_keyring(self) -> object:
        if self._keyring is not None:
            return self._keyring
        try:
            import keyring  # type: ignore[import-untyped]
        except ImportError as exc:
            raise VaultError(
                "keyring package required. Install with: pip install keyring", orig_exc=exc
            ) from exc
        self._keyring = keyring
        return keyring

    def add(self, namespace: str, account: str, payload: bytes) -> None:
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise VaultError("Keyring payloads must be UTF-8 text", namespace, exc) from exc
        kr = self._ensure_keyring()
        try:
            kr.set_password(namespace, account, text)  # type: ignore[union-attr]
        except Exception as exc:
            raise VaultError("Keyring refused the write", namespace, exc) from exc

    def delete(self, namespace: str, account: str) -> None:
        kr = self._ensure_keyring()
        from keyring.errors import PasswordDeleteError

        try:
            kr.delete_password(namespace, account)  # type: ignore[union-attr]
        except PasswordDeleteError:
            logger.debug("No keyring entry to delete for '%s'", namespace)
        except Exception as exc:
            raise VaultError("Keyring refused the delete", namespace, exc) from exc

    def query(self, namespace: str, account: str) -> Optional[bytes]:
        kr = self._ensure_keyring()
        try:
            text = kr.get_password(namespace, account)  # type: ignore[union-attr]
        except Exception as exc:
            raise VaultError("Keyring read failed", namespace, exc) from exc
        if text is None:
            return None
        return text.encode("utf-8")


def create_vault(backend: str = "keyring", **kwargs: str) -> SecretVault:
    """Factory for secret vaults."""
    if backend == "keyring":
        return KeyringVault()
    if backend == "file":
        return FileVault(path=kwargs.get("path") or DEFAULT_SECRETS_FILE)
    if backend == "memory":
        return MemoryVault()
    raise ValueError(f"Unknown vault backend: {backend!r}")
