"""Free-text note format of dated ledger entries.

A dated entry carries ``"BH - DD/MM/YYYY"`` at the start of its note, an
optional shift description and the registered hours as a ``"(Nh)"`` suffix::

    BH - 10/03/2024 | Diurno 07:00-19:00 (12h)
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import format_br_date
from ..common.validators import format_hours
from ..core.constants import DATE_MARKER_LABEL
from .model import ShiftPreset

DATE_MARKER_RE = re.compile(re.escape(DATE_MARKER_LABEL) + r" - (\d{2})/(\d{2})/(\d{4})")
HOURS_SUFFIX_RE = re.compile(r"\(\d+(?:\.\d+)?h\)")


def date_marker(work_date: date) -> str:
    return f"{DATE_MARKER_LABEL} - {format_br_date(work_date)}"


def has_date_marker(note: Optional[str]) -> bool:
    return bool(note) and DATE_MARKER_RE.search(note) is not None


def marker_date(note: Optional[str]) -> Optional[date]:
    """Date embedded in the note, or None when absent or not a real date."""

    if not note:
        return None
    match = DATE_MARKER_RE.search(note)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def build_note(work_date: date, hours: Decimal, shift: Optional[ShiftPreset] = None) -> str:
    parts = [date_marker(work_date)]
    if shift is not None:
        parts.append(f"| {shift.label} {shift.time_range}")
    parts.append(f"({format_hours(hours)}h)")
    return " ".join(parts)


def rewrite_hours_suffix(note: Optional[str], hours: Decimal) -> Optional[str]:
    """Replace the last ``(Nh)`` suffix, keeping the rest of the note intact."""

    if not note:
        return note
    matches = list(HOURS_SUFFIX_RE.finditer(note))
    if not matches:
        return note
    last = matches[-1]
    return f"{note[:last.start()]}({format_hours(hours)}h){note[last.end():]}"
