"""Balance engine: folds ledger entries into signed totals.

Nothing here is cached; every figure is recomputed from the full entry list.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from ..core.constants import DEFAULT_TREND_MONTHS, FIRST_HALF_LAST_DAY
from ..core.enums import EntryKind
from .date_resolver import resolve_entry_date
from .model import LedgerEntry

ZERO = Decimal("0")
ONE_PLACE = Decimal("0.1")
TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class FortnightTotals:
    first_half: Decimal
    second_half: Decimal
    month: Decimal

    def as_dict(self, hourly_rate: Decimal) -> dict:
        return {
            "first_half": {"hours": str(self.first_half), "value": str(monetary_value(self.first_half, hourly_rate))},
            "second_half": {"hours": str(self.second_half), "value": str(monetary_value(self.second_half, hourly_rate))},
            "month": {"hours": str(self.month), "value": str(monetary_value(self.month, hourly_rate))},
        }


@dataclass(frozen=True)
class MonthBucket:
    year: int
    month: int
    hours: Decimal
    monetary_value: Decimal

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def as_dict(self) -> dict:
        return {"month": self.label, "hours": str(self.hours), "value": str(self.monetary_value)}


@dataclass(frozen=True)
class KindTotals:
    credits: Decimal
    debits: Decimal

    @property
    def balance(self) -> Decimal:
        return self.credits - self.debits


def balance(entries: Iterable[LedgerEntry]) -> Decimal:
    return sum((e.signed_hours for e in entries), ZERO)


def totals_by_kind(entries: Iterable[LedgerEntry]) -> KindTotals:
    credits = ZERO
    debits = ZERO
    for e in entries:
        if e.kind == EntryKind.CREDIT:
            credits += e.hours
        else:
            debits += abs(e.hours)
    return KindTotals(credits=credits, debits=debits)


def monetary_value(hours: Decimal, hourly_rate: Decimal) -> Decimal:
    return (hours * hourly_rate).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def fortnight_totals(entries: Iterable[LedgerEntry], month_anchor: date) -> FortnightTotals:
    first = ZERO
    second = ZERO
    for e in entries:
        day = resolve_entry_date(e)
        if (day.year, day.month) != (month_anchor.year, month_anchor.month):
            continue
        if day.day <= FIRST_HALF_LAST_DAY:
            first += e.signed_hours
        else:
            second += e.signed_hours
    return FortnightTotals(first_half=first, second_half=second, month=first + second)


def _months_back(today: date, count: int) -> list[tuple[int, int]]:
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        year, month = (year - 1, 12) if month == 1 else (year, month - 1)
    months.reverse()
    return months


def trailing_months(
    entries: Iterable[LedgerEntry],
    today: date,
    hourly_rate: Decimal,
    count: int = DEFAULT_TREND_MONTHS,
) -> Sequence[MonthBucket]:
    """Signed totals per calendar month, oldest first, ending at today's month."""

    sums: dict[tuple[int, int], Decimal] = {}
    for e in entries:
        day = resolve_entry_date(e)
        key = (day.year, day.month)
        sums[key] = sums.get(key, ZERO) + e.signed_hours

    buckets = []
    for year, month in _months_back(today, count):
        total = sums.get((year, month), ZERO)
        buckets.append(
            MonthBucket(
                year=year,
                month=month,
                hours=total.quantize(ONE_PLACE, rounding=ROUND_HALF_UP),
                monetary_value=monetary_value(total, hourly_rate),
            )
        )
    return tuple(buckets)
