from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_month(value: str) -> date:
    """Parse YYYY-MM string into the first day of that month."""
    return datetime.strptime(value, "%Y-%m").date()


def format_br_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def local_date(value: datetime) -> date:
    """Calendar date of a timestamp as seen on this machine."""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
