from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import EntryKind
from .model import LedgerEntry, OwnerSettings


class LedgerRepository(Protocol):
    """Durable store of ledger entries and per-owner settings.

    Implementations raise ``StoreError`` when the backing store fails.
    """

    def list_entries(self, owner_id: str) -> Sequence[LedgerEntry]:
        """Entries of one owner, most recent ``created_at`` first."""

        raise NotImplementedError

    def insert_entry(
        self,
        *,
        owner_id: str,
        hours: Decimal,
        kind: EntryKind,
        note: Optional[str],
    ) -> LedgerEntry:
        """Store assigns ``entry_id`` and ``created_at``."""

        raise NotImplementedError

    def update_entry(
        self,
        entry_id: str,
        *,
        hours: Optional[Decimal] = None,
        note: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def delete_entry(self, entry_id: str) -> None:
        raise NotImplementedError

    def get_owner_settings(self, owner_id: str) -> Optional[OwnerSettings]:
        raise NotImplementedError
