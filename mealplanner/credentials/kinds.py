"""Credential kinds — the closed set of vault slots the app knows about.

Each member's value is the reverse-domain namespace its record lives
under in the vault.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from mealplanner.constants import ENV_KEY_PREFIX, ENV_KEY_SUFFIX


class CredentialKind(str, Enum):
    USDA = "mealplanner.usda.apikey"
    CLAUDE = "mealplanner.claude.apikey"
    OPENAI = "mealplanner.openai.apikey"
    HUGGINGFACE = "mealplanner.huggingface.apikey"

    @property
    def namespace(self) -> str:
        return self.value

    @property
    def short_name(self) -> str:
        """``usda``, ``claude``, ... (the middle namespace segment)."""
        return self.value.split(".")[1]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def env_var(self) -> str:
        return f"{ENV_KEY_PREFIX}{self.name}{ENV_KEY_SUFFIX}"

    @classmethod
    def parse(cls, text: str) -> "CredentialKind":
        """Resolve a short name, namespace, or member name to a kind.

        Raises ``ValueError`` for anything outside the known set.
        """
        needle = text.strip().lower()
        for kind in cls:
            if needle in (kind.short_name, kind.value, kind.name.lower()):
                return kind
        valid = ", ".join(k.short_name for k in cls)
        raise ValueError(f"Unknown credential kind {text!r} (expected one of: {valid})")


_LABELS = {
    CredentialKind.USDA: "USDA",
    CredentialKind.CLAUDE: "Claude",
    CredentialKind.OPENAI: "OpenAI",
    CredentialKind.HUGGINGFACE: "Hugging Face",
}

# Kinds whose absence blocks the app's setup flow.
REQUIRED_KINDS: List[CredentialKind] = [CredentialKind.USDA, CredentialKind.CLAUDE]
