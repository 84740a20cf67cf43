from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import format_hours, require_positive_hours
from ..core.constants import (
    ADMIN_CREDIT_NOTE,
    ADMIN_DEBIT_NOTE,
    DEFAULT_BALANCE_CEILING,
    DEFAULT_HOURLY_RATE,
    DEFAULT_TREND_MONTHS,
)
from ..core.enums import EntryKind, RejectReason
from ..core.exceptions import DomainError, PolicyError, StoreError, ValidationError
from ..periods.fortnight import FortnightInfo, current_fortnight_info, days_without_entry
from .balance import FortnightTotals, MonthBucket, balance, fortnight_totals, monetary_value, trailing_months
from .date_resolver import resolve_entry_date
from .guard import Decision, can_mutate, can_register, is_editable
from .limits import LimitUsage, can_add, can_edit, limit_usage
from .model import LedgerEntry, OwnerSettings, ShiftPreset
from .notes import build_note, has_date_marker, marker_date, rewrite_hours_suffix
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryView:
    entry: LedgerEntry
    work_date: date
    dated: bool
    editable: bool

    def as_dict(self) -> dict:
        e = self.entry
        return {
            "id": e.entry_id,
            "hours": str(e.hours),
            "kind": e.kind.value,
            "note": e.note,
            "created_at": e.created_at.isoformat(),
            "work_date": self.work_date.isoformat(),
            "dated": self.dated,
            "editable": self.editable,
        }


@dataclass(frozen=True)
class LedgerSnapshot:
    """Every figure the UI shows, derived from one fetch of the ledger."""

    owner_id: str
    today: date
    settings: OwnerSettings
    entries: Sequence[EntryView]
    balance: Decimal
    monetary_value: Decimal
    current_fortnight: FortnightInfo
    month_anchor: date
    fortnight_totals: FortnightTotals
    trend: Sequence[MonthBucket]
    limit: LimitUsage
    marked_dates: Sequence[date]
    days_without_entry: Sequence[date]

    def as_dict(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "today": self.today.isoformat(),
            "hourly_rate": str(self.settings.hourly_rate),
            "balance_ceiling": str(self.settings.balance_ceiling),
            "balance": str(self.balance),
            "monetary_value": str(self.monetary_value),
            "current_fortnight": self.current_fortnight.as_dict(),
            "month": self.month_anchor.strftime("%Y-%m"),
            "fortnight_totals": self.fortnight_totals.as_dict(self.settings.hourly_rate),
            "trend": [b.as_dict() for b in self.trend],
            "limit": self.limit.as_dict(),
            "marked_dates": [d.isoformat() for d in self.marked_dates],
            "days_without_entry": [d.isoformat() for d in self.days_without_entry],
            "entries": [v.as_dict() for v in self.entries],
        }


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a mutating operation.

    Rejections carry ``reason`` and never touched the store. When the write
    succeeded but the follow-up read failed, ``snapshot`` is None and
    ``refresh_error`` holds the store failure.
    """

    ok: bool
    reason: Optional[RejectReason] = None
    message: str = ""
    entry: Optional[LedgerEntry] = None
    snapshot: Optional[LedgerSnapshot] = None
    refresh_error: Optional[StoreError] = None

    @classmethod
    def rejected(cls, error: DomainError) -> "OperationResult":
        return cls(ok=False, reason=error.reason, message=str(error))

    @property
    def is_validation_error(self) -> bool:
        return self.reason in {RejectReason.INVALID_HOURS, RejectReason.MISSING_DATE, RejectReason.ENTRY_NOT_FOUND}


class LedgerService:
    def __init__(
        self,
        ledger: LedgerRepository,
        *,
        default_hourly_rate: Decimal = DEFAULT_HOURLY_RATE,
        default_ceiling: Decimal = DEFAULT_BALANCE_CEILING,
        trend_months: int = DEFAULT_TREND_MONTHS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._ledger = ledger
        self._default_hourly_rate = Decimal(default_hourly_rate)
        self._default_ceiling = Decimal(default_ceiling)
        self._trend_months = int(trend_months)
        self._clock = clock

    # Reads

    def _today(self, today: Optional[date]) -> date:
        return today or self._clock().date()

    def get_settings(self, owner_id: str) -> OwnerSettings:
        stored = self._ledger.get_owner_settings(owner_id) or OwnerSettings()
        return stored.with_defaults(hourly_rate=self._default_hourly_rate, balance_ceiling=self._default_ceiling)

    def snapshot(
        self,
        owner_id: str,
        *,
        is_privileged: bool = False,
        today: Optional[date] = None,
        month_anchor: Optional[date] = None,
    ) -> LedgerSnapshot:
        today = self._today(today)
        entries = list(self._ledger.list_entries(owner_id))
        settings = self.get_settings(owner_id)
        return self._derive(owner_id, entries, settings, today=today, is_privileged=is_privileged, month_anchor=month_anchor)

    def _derive(
        self,
        owner_id: str,
        entries: list[LedgerEntry],
        settings: OwnerSettings,
        *,
        today: date,
        is_privileged: bool,
        month_anchor: Optional[date],
    ) -> LedgerSnapshot:
        total = balance(entries)
        marked = sorted({d for d in (marker_date(e.note) for e in entries) if d is not None})
        views = [
            EntryView(
                entry=e,
                work_date=resolve_entry_date(e),
                dated=has_date_marker(e.note),
                editable=is_editable(e, today, is_privileged),
            )
            for e in entries
        ]
        anchor = month_anchor or today
        return LedgerSnapshot(
            owner_id=owner_id,
            today=today,
            settings=settings,
            entries=tuple(views),
            balance=total,
            monetary_value=monetary_value(total, settings.hourly_rate),
            current_fortnight=current_fortnight_info(today),
            month_anchor=anchor,
            fortnight_totals=fortnight_totals(entries, anchor),
            trend=trailing_months(entries, today, settings.hourly_rate, count=self._trend_months),
            limit=limit_usage(total, settings.balance_ceiling),
            marked_dates=tuple(marked),
            days_without_entry=tuple(days_without_entry(marked, today)),
        )

    def preview_registration(
        self,
        owner_id: str,
        work_date: date,
        *,
        hours: object = None,
        is_privileged: bool = False,
        today: Optional[date] = None,
    ) -> Decision:
        """What happens if the agent clicks ``work_date`` on the calendar."""

        today = self._today(today)
        entries = list(self._ledger.list_entries(owner_id))
        decision = can_register(work_date, today, entries, is_privileged)
        if not decision.allowed or hours is None:
            return decision

        ceiling = self.get_settings(owner_id).balance_ceiling
        if not can_add(require_positive_hours(hours), balance(entries), ceiling):
            return Decision.reject(RejectReason.LIMIT_EXCEEDED)
        return decision

    # Writes

    @staticmethod
    def _enforce(decision: Decision) -> None:
        if not decision.allowed:
            raise PolicyError(decision.message, reason=decision.reason)

    @staticmethod
    def _find(entries: Sequence[LedgerEntry], entry_id: str) -> LedgerEntry:
        for e in entries:
            if e.entry_id == str(entry_id):
                return e
        raise ValidationError("Registro não encontrado", reason=RejectReason.ENTRY_NOT_FOUND)

    def _completed(self, owner_id: str, entry: LedgerEntry, *, today: date, is_privileged: bool) -> OperationResult:
        try:
            view = self.snapshot(owner_id, is_privileged=is_privileged, today=today)
        except StoreError as e:
            # Write already applied; caller keeps a stale view until the next read.
            logger.warning("Ledger re-read failed for agent %s after writing %s: %s", owner_id, entry.entry_id, e)
            return OperationResult(ok=True, entry=entry, refresh_error=e)
        return OperationResult(ok=True, entry=entry, snapshot=view)

    def register(
        self,
        owner_id: str,
        work_date: Optional[date],
        hours: object,
        *,
        shift: Optional[ShiftPreset] = None,
        kind: EntryKind = EntryKind.CREDIT,
        is_privileged: bool = False,
        today: Optional[date] = None,
    ) -> OperationResult:
        today = self._today(today)
        try:
            hours = require_positive_hours(hours)
            if work_date is None:
                raise ValidationError("Selecione uma data", reason=RejectReason.MISSING_DATE)

            entries = list(self._ledger.list_entries(owner_id))
            self._enforce(can_register(work_date, today, entries, is_privileged))

            ceiling = self.get_settings(owner_id).balance_ceiling
            if kind == EntryKind.CREDIT and not can_add(hours, balance(entries), ceiling):
                raise PolicyError(
                    f"Adicionar {format_hours(hours)}h excederia o limite de {format_hours(ceiling)}h",
                    reason=RejectReason.LIMIT_EXCEEDED,
                )
        except (ValidationError, PolicyError) as e:
            logger.info("Rejected registration for agent %s on %s: %s", owner_id, work_date, e.reason)
            return OperationResult.rejected(e)

        entry = self._ledger.insert_entry(
            owner_id=owner_id,
            hours=hours,
            kind=kind,
            note=build_note(work_date, hours, shift),
        )
        logger.info("Registered %sh (%s) for agent %s on %s", hours, kind.value, owner_id, work_date)
        return self._completed(owner_id, entry, today=today, is_privileged=is_privileged)

    def edit(
        self,
        owner_id: str,
        entry_id: str,
        new_hours: object,
        *,
        is_privileged: bool = False,
        today: Optional[date] = None,
    ) -> OperationResult:
        today = self._today(today)
        try:
            new_hours = require_positive_hours(new_hours)
            entries = list(self._ledger.list_entries(owner_id))
            entry = self._find(entries, entry_id)
            self._enforce(can_mutate(entry, today, is_privileged))

            ceiling = self.get_settings(owner_id).balance_ceiling
            if not can_edit(entry.hours, new_hours, balance(entries), entry.kind, ceiling):
                raise PolicyError(
                    f"Esta alteração excederia o limite de {format_hours(ceiling)}h",
                    reason=RejectReason.LIMIT_EXCEEDED,
                )
        except (ValidationError, PolicyError) as e:
            logger.info("Rejected edit of entry %s for agent %s: %s", entry_id, owner_id, e.reason)
            return OperationResult.rejected(e)

        note = rewrite_hours_suffix(entry.note, new_hours)
        self._ledger.update_entry(entry.entry_id, hours=new_hours, note=note)
        logger.info("Updated entry %s for agent %s: %sh -> %sh", entry.entry_id, owner_id, entry.hours, new_hours)
        updated = replace(entry, hours=new_hours, note=note)
        return self._completed(owner_id, updated, today=today, is_privileged=is_privileged)

    def delete(
        self,
        owner_id: str,
        entry_id: str,
        *,
        is_privileged: bool = False,
        today: Optional[date] = None,
    ) -> OperationResult:
        today = self._today(today)
        try:
            entries = list(self._ledger.list_entries(owner_id))
            entry = self._find(entries, entry_id)
            self._enforce(can_mutate(entry, today, is_privileged))
        except (ValidationError, PolicyError) as e:
            logger.info("Rejected delete of entry %s for agent %s: %s", entry_id, owner_id, e.reason)
            return OperationResult.rejected(e)

        self._ledger.delete_entry(entry.entry_id)
        logger.info("Deleted entry %s for agent %s", entry.entry_id, owner_id)
        return self._completed(owner_id, entry, today=today, is_privileged=is_privileged)

    def adjust(
        self,
        owner_id: str,
        hours: object,
        kind: EntryKind,
        *,
        is_privileged: bool,
        description: Optional[str] = None,
        today: Optional[date] = None,
    ) -> OperationResult:
        """Manual admin credit/debit.

        Not bound to a fortnight; credits still respect the ceiling. A
        description carrying a date marker dates the entry, so that date
        goes through the future and duplicate checks like a registration.
        """

        today = self._today(today)
        note = (description or "").strip() or (ADMIN_CREDIT_NOTE if kind == EntryKind.CREDIT else ADMIN_DEBIT_NOTE)
        try:
            if not is_privileged:
                raise PolicyError("Apenas administradores podem ajustar o banco de horas", reason=RejectReason.NOT_PRIVILEGED)
            hours = require_positive_hours(hours)

            entries = list(self._ledger.list_entries(owner_id))
            if has_date_marker(note):
                work_date = marker_date(note)
                if work_date is None:
                    raise ValidationError("Data inválida na descrição", reason=RejectReason.MISSING_DATE)
                self._enforce(can_register(work_date, today, entries, is_privileged))

            if kind == EntryKind.CREDIT:
                ceiling = self.get_settings(owner_id).balance_ceiling
                if not can_add(hours, balance(entries), ceiling):
                    raise PolicyError(
                        f"Adicionar {format_hours(hours)}h excederia o limite de {format_hours(ceiling)}h",
                        reason=RejectReason.LIMIT_EXCEEDED,
                    )
        except (ValidationError, PolicyError) as e:
            logger.info("Rejected %s adjustment for agent %s: %s", kind.value, owner_id, e.reason)
            return OperationResult.rejected(e)

        entry = self._ledger.insert_entry(owner_id=owner_id, hours=hours, kind=kind, note=note)
        logger.info("Admin %s of %sh for agent %s", kind.value, hours, owner_id)
        return self._completed(owner_id, entry, today=today, is_privileged=is_privileged)
