"""Per-kind availability, as shown by the status indicator dots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from mealplanner.constants import DEMO_MODE_SENTINEL

from .kinds import REQUIRED_KINDS, CredentialKind
from .store import CredentialStore, LookupStatus


@dataclass(frozen=True)
class KeyStatus:
    kind: CredentialKind
    label: str
    configured: bool
    demo: bool = False
    lookup: LookupStatus = LookupStatus.NOT_FOUND


def key_statuses(
    store: CredentialStore, kinds: Optional[Iterable[CredentialKind]] = None
) -> List[KeyStatus]:
    """Build one :class:`KeyStatus` per kind (default: USDA and Claude).

    Each kind is read once; ``configured`` follows
    :meth:`CredentialStore.is_configured`.
    """
    statuses: List[KeyStatus] = []
    for kind in kinds if kinds is not None else REQUIRED_KINDS:
        result = store.lookup(kind)
        demo = kind is CredentialKind.USDA and result.value == DEMO_MODE_SENTINEL
        statuses.append(
            KeyStatus(
                kind=kind,
                label=kind.label,
                configured=bool(result.value) and not demo,
                demo=demo,
                lookup=result.status,
            )
        )
    return statuses
