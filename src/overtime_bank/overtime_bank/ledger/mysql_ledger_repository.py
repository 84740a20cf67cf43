from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import EntryKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import LedgerEntry, OwnerSettings
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


def _row_to_entry(r: dict) -> LedgerEntry:
    return LedgerEntry(
        entry_id=str(r["id"]),
        owner_id=str(r["agent_id"]),
        hours=to_decimal(r["hours"]),
        kind=EntryKind(r["operation_type"]),
        note=r.get("description"),
        created_at=r["created_at"],
    )


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_entries(self, owner_id: str) -> Sequence[LedgerEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, agent_id, hours, operation_type, description, created_at
                FROM overtime_bank
                WHERE agent_id=%s
                ORDER BY created_at DESC
                """,
                (owner_id,),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def insert_entry(
        self,
        *,
        owner_id: str,
        hours: Decimal,
        kind: EntryKind,
        note: Optional[str],
    ) -> LedgerEntry:
        entry = LedgerEntry(
            entry_id=str(uuid.uuid4()),
            owner_id=owner_id,
            hours=hours,
            kind=kind,
            note=note,
            created_at=datetime.now(),
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO overtime_bank(id, agent_id, hours, operation_type, description, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (entry.entry_id, owner_id, hours, kind.value, note, entry.created_at),
            )
        logger.debug("Inserted %s entry %s for agent %s", kind.value, entry.entry_id, owner_id)
        return entry

    def update_entry(
        self,
        entry_id: str,
        *,
        hours: Optional[Decimal] = None,
        note: Optional[str] = None,
    ) -> None:
        assignments = []
        params: list = []
        if hours is not None:
            assignments.append("hours=%s")
            params.append(hours)
        if note is not None:
            assignments.append("description=%s")
            params.append(note)
        if not assignments:
            return

        params.append(entry_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE overtime_bank SET {', '.join(assignments)} WHERE id=%s", tuple(params))

    def delete_entry(self, entry_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM overtime_bank WHERE id=%s", (entry_id,))

    def get_owner_settings(self, owner_id: str) -> Optional[OwnerSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT bh_hourly_rate, bh_limit
                FROM agents
                WHERE id=%s
                """,
                (owner_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return OwnerSettings(
                hourly_rate=to_decimal(r.get("bh_hourly_rate")),
                balance_ceiling=to_decimal(r.get("bh_limit")),
            )

    def list_active_owner_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM agents WHERE is_active=1 ORDER BY name")
            return [str(r["id"]) for r in fetchall(cur)]
