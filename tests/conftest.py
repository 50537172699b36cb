"""Shared fixtures for the credential store tests."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import pytest

from mealplanner.credentials.store import CredentialStore
from mealplanner.credentials.vaults import MemoryVault
from mealplanner.display.logging_config import secret_redaction_filter
from mealplanner.errors import VaultError


class FlakyVault(MemoryVault):
    """MemoryVault whose operations can be made to fail on demand."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_add = False
        self.fail_next_add = False
        self.fail_delete = False
        self.fail_query = False
        self.add_calls = 0

    def add(self, namespace: str, account: str, payload: bytes) -> None:
        self.add_calls += 1
        if self.fail_add or self.fail_next_add:
            self.fail_next_add = False
            raise VaultError("add refused", namespace)
        super().add(namespace, account, payload)

    def delete(self, namespace: str, account: str) -> None:
        if self.fail_delete:
            raise VaultError("delete refused", namespace)
        super().delete(namespace, account)

    def query(self, namespace: str, account: str) -> Optional[bytes]:
        if self.fail_query:
            raise VaultError("vault locked", namespace)
        return super().query(namespace, account)


class FakeKeyring:
    """Stands in for the ``keyring`` module's get/set/delete functions."""

    def __init__(self) -> None:
        self.entries: Dict[Tuple[str, str], str] = {}
        self.fail_with: Optional[Exception] = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def get_password(self, service: str, username: str) -> Optional[str]:
        self._check()
        return self.entries.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self._check()
        self.entries[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        from keyring.errors import PasswordDeleteError

        self._check()
        if (service, username) not in self.entries:
            raise PasswordDeleteError("Password not found")
        del self.entries[(service, username)]


@pytest.fixture
def vault() -> FlakyVault:
    return FlakyVault()


@pytest.fixture
def store(vault: FlakyVault) -> CredentialStore:
    return CredentialStore(vault)


@pytest.fixture
def fake_keyring() -> FakeKeyring:
    return FakeKeyring()


@pytest.fixture
def fernet_key(monkeypatch) -> str:
    from cryptography.fernet import Fernet

    key = Fernet.generate_key().decode()
    monkeypatch.setenv("MEALPLANNER_SECRET_KEY", key)
    return key


@pytest.fixture(autouse=True)
def _reset_redaction_filter():
    yield
    secret_redaction_filter.clear()
