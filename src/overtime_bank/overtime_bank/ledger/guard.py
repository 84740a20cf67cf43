"""Lock & eligibility rules for creating, editing and deleting entries.

The privilege flag comes from the caller; it lifts the fortnight lock only.
Future dates and duplicate dates stay blocked for everyone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..core.enums import RejectReason
from ..periods.fortnight import is_closed
from .date_resolver import resolve_entry_date
from .model import LedgerEntry
from .notes import marker_date

MESSAGES = {
    RejectReason.FUTURE_DATE: "Não é possível registrar BH em data futura",
    RejectReason.FORTNIGHT_CLOSED: "Esta data pertence a uma quinzena fechada. Apenas visualização permitida.",
    RejectReason.DUPLICATE_FOR_DATE: "Este dia já possui registro de BH",
    RejectReason.LIMIT_EXCEEDED: "Limite do banco de horas excedido",
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[RejectReason] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def reject(cls, reason: RejectReason) -> "Decision":
        return cls(allowed=False, reason=reason)

    @property
    def message(self) -> str:
        return MESSAGES.get(self.reason, "") if self.reason else ""


def can_register(
    work_date: date,
    today: date,
    existing_entries: Iterable[LedgerEntry],
    is_privileged: bool,
) -> Decision:
    if work_date > today:
        return Decision.reject(RejectReason.FUTURE_DATE)

    if is_closed(work_date, today, is_privileged):
        return Decision.reject(RejectReason.FORTNIGHT_CLOSED)

    for entry in existing_entries:
        if marker_date(entry.note) == work_date:
            return Decision.reject(RejectReason.DUPLICATE_FOR_DATE)

    return Decision.allow()


def can_mutate(entry: LedgerEntry, today: date, is_privileged: bool) -> Decision:
    """Same rule for edit and delete: the entry's day must not be locked."""

    if is_privileged:
        return Decision.allow()
    if is_closed(resolve_entry_date(entry), today, is_privileged):
        return Decision.reject(RejectReason.FORTNIGHT_CLOSED)
    return Decision.allow()


def is_editable(entry: LedgerEntry, today: date, is_privileged: bool) -> bool:
    return can_mutate(entry, today, is_privileged).allowed
