from __future__ import annotations

from datetime import date

from ..common.datetime_utils import local_date
from .model import LedgerEntry
from .notes import marker_date


def resolve_entry_date(entry: LedgerEntry) -> date:
    """Calendar day the entry belongs to.

    The date marker in the note wins; entries without a usable marker fall
    back to the local date of ``created_at``.
    """

    embedded = marker_date(entry.note)
    if embedded is not None:
        return embedded
    return local_date(entry.created_at)
