from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal
from typing import Optional

from ..core.enums import EntryKind


@dataclass(frozen=True)
class LedgerEntry:
    """Entidade de domínio: um lançamento (crédito/débito) no banco de horas."""

    entry_id: str
    owner_id: str
    hours: Decimal
    kind: EntryKind
    note: Optional[str]
    created_at: datetime

    @property
    def signed_hours(self) -> Decimal:
        return self.hours if self.kind == EntryKind.CREDIT else -self.hours


@dataclass(frozen=True)
class OwnerSettings:
    """Per-agent valuation and ceiling. Missing values are filled by the service."""

    hourly_rate: Optional[Decimal] = None
    balance_ceiling: Optional[Decimal] = None

    def with_defaults(self, *, hourly_rate: Decimal, balance_ceiling: Decimal) -> "OwnerSettings":
        return OwnerSettings(
            hourly_rate=self.hourly_rate if self.hourly_rate is not None else hourly_rate,
            balance_ceiling=self.balance_ceiling if self.balance_ceiling is not None else balance_ceiling,
        )


@dataclass(frozen=True)
class ShiftPreset:
    """Shift option the agent picks when registering a day."""

    key: str
    label: str
    start_time: time
    end_time: time
    hours: Decimal

    @property
    def time_range(self) -> str:
        return f"{self.start_time.strftime('%H:%M')}-{self.end_time.strftime('%H:%M')}"


SHIFT_PRESETS = (
    ShiftPreset(key="day", label="Diurno", start_time=time(7, 0), end_time=time(19, 0), hours=Decimal("12")),
    ShiftPreset(key="night", label="Noturno", start_time=time(19, 0), end_time=time(7, 0), hours=Decimal("12")),
    ShiftPreset(key="full", label="Dia Inteiro", start_time=time(7, 0), end_time=time(7, 0), hours=Decimal("24")),
)


def get_shift_preset(key: str) -> Optional[ShiftPreset]:
    for preset in SHIFT_PRESETS:
        if preset.key == key:
            return preset
    return None
