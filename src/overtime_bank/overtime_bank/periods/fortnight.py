"""Fortnight calendar: days 1-15 and day 16 to month end.

A fortnight is open while it contains "today"; every earlier fortnight is
closed for non-privileged callers. Future fortnights are never closed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..core.constants import FIRST_HALF_LAST_DAY
from ..core.enums import FortnightHalf

MONTH_NAMES_PT = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


def last_day_of_month(year: int, month: int) -> int:
    # Day 0 of the next month, rolling the year over after December.
    next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
    return (date(next_year, next_month, 1) - timedelta(days=1)).day


@dataclass(frozen=True)
class Fortnight:
    year: int
    month: int
    half: FortnightHalf

    @property
    def start(self) -> date:
        day = 1 if self.half == FortnightHalf.FIRST else FIRST_HALF_LAST_DAY + 1
        return date(self.year, self.month, day)

    @property
    def end(self) -> date:
        if self.half == FortnightHalf.FIRST:
            return date(self.year, self.month, FIRST_HALF_LAST_DAY)
        return date(self.year, self.month, last_day_of_month(self.year, self.month))

    @property
    def label(self) -> str:
        return "1ª Quinzena" if self.half == FortnightHalf.FIRST else "2ª Quinzena"

    @property
    def range_label(self) -> str:
        return f"{self.start.day:02d} a {self.end.day:02d} de {MONTH_NAMES_PT[self.month - 1]}"

    def contains(self, value: date) -> bool:
        return self.start <= value <= self.end

    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range((self.end - self.start).days + 1)]

    def sort_key(self) -> tuple[int, int, int]:
        return (self.year, self.month, 0 if self.half == FortnightHalf.FIRST else 1)


@dataclass(frozen=True)
class FortnightInfo:
    """Read-model for the "current fortnight" banner."""

    fortnight: Fortnight
    label: str
    range_label: str
    start: date
    end: date
    days_remaining: int

    def as_dict(self) -> dict:
        return {
            "label": self.label,
            "range": self.range_label,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "days_remaining": self.days_remaining,
        }


def fortnight_of(value: date) -> Fortnight:
    half = FortnightHalf.FIRST if value.day <= FIRST_HALF_LAST_DAY else FortnightHalf.SECOND
    return Fortnight(year=value.year, month=value.month, half=half)


def is_open(fortnight: Fortnight, today: date) -> bool:
    return fortnight == fortnight_of(today)


def is_closed(value: date, today: date, is_privileged: bool) -> bool:
    """True when ``value`` sits in a fortnight that ended before today's.

    Privileged callers never see a closed fortnight. Dates in today's
    fortnight or later are not closed.
    """

    if is_privileged:
        return False
    return fortnight_of(value).sort_key() < fortnight_of(today).sort_key()


def current_fortnight_info(today: date) -> FortnightInfo:
    current = fortnight_of(today)
    return FortnightInfo(
        fortnight=current,
        label=current.label,
        range_label=current.range_label,
        start=current.start,
        end=current.end,
        days_remaining=(current.end - today).days,
    )


def days_without_entry(marked_dates: Iterable[date], today: date) -> Sequence[date]:
    """Days of the current fortnight, up to today, with no dated entry."""

    marked = set(marked_dates)
    current = fortnight_of(today)
    return [d for d in current.days() if d <= today and d not in marked]
