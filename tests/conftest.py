from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from src.overtime_bank.overtime_bank.core.enums import EntryKind
from src.overtime_bank.overtime_bank.core.exceptions import StoreError
from src.overtime_bank.overtime_bank.ledger.model import LedgerEntry, OwnerSettings


class InMemoryLedger:
    """Fake store: keeps entries in a dict and counts reads/writes."""

    def __init__(self, *, now: datetime):
        self._entries: dict[str, LedgerEntry] = {}
        self._settings: dict[str, OwnerSettings] = {}
        self._seq = 0
        self._now = now
        self.writes = 0
        self.reads = 0
        self.fail_reads = False
        self.fail_writes = False
        self.fail_reads_after_write = False

    def seed(
        self,
        *,
        owner_id: str,
        hours: str,
        kind: EntryKind = EntryKind.CREDIT,
        note: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> LedgerEntry:
        self._seq += 1
        entry = LedgerEntry(
            entry_id=f"e{self._seq}",
            owner_id=owner_id,
            hours=Decimal(hours),
            kind=kind,
            note=note,
            created_at=created_at or self._now + timedelta(seconds=self._seq),
        )
        self._entries[entry.entry_id] = entry
        return entry

    def set_settings(self, owner_id: str, settings: OwnerSettings) -> None:
        self._settings[owner_id] = settings

    def get(self, entry_id: str) -> Optional[LedgerEntry]:
        return self._entries.get(entry_id)

    def _write(self) -> None:
        if self.fail_writes:
            raise StoreError("write failed")
        self.writes += 1
        if self.fail_reads_after_write:
            self.fail_reads = True

    def list_entries(self, owner_id: str):
        if self.fail_reads:
            raise StoreError("read failed")
        self.reads += 1
        items = [e for e in self._entries.values() if e.owner_id == owner_id]
        items.sort(key=lambda e: e.created_at, reverse=True)
        return items

    def insert_entry(self, *, owner_id, hours, kind, note):
        self._write()
        return self.seed(owner_id=owner_id, hours=str(hours), kind=kind, note=note)

    def update_entry(self, entry_id, *, hours=None, note=None):
        self._write()
        e = self._entries[entry_id]
        self._entries[entry_id] = LedgerEntry(
            entry_id=e.entry_id,
            owner_id=e.owner_id,
            hours=hours if hours is not None else e.hours,
            kind=e.kind,
            note=note if note is not None else e.note,
            created_at=e.created_at,
        )

    def delete_entry(self, entry_id):
        self._write()
        self._entries.pop(entry_id, None)

    def get_owner_settings(self, owner_id):
        if self.fail_reads:
            raise StoreError("read failed")
        return self._settings.get(owner_id)

    def list_active_owner_ids(self):
        owners = {e.owner_id for e in self._entries.values()} | set(self._settings)
        return sorted(owners)


@pytest.fixture
def today() -> date:
    # Second fortnight of March 2024.
    return date(2024, 3, 20)


@pytest.fixture
def fixed_now(today) -> datetime:
    return datetime(today.year, today.month, today.day, 10, 0)


@pytest.fixture
def ledger_repo(fixed_now) -> InMemoryLedger:
    return InMemoryLedger(now=fixed_now)
