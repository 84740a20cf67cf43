from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Session role, only used to derive the privilege flag at the HTTP seam."""

    ADMIN = "admin"
    AGENT = "agent"


class EntryKind(str, Enum):
    """Direction of a ledger entry against the running balance."""

    CREDIT = "credit"
    DEBIT = "debit"


class FortnightHalf(str, Enum):
    FIRST = "FIRST"
    SECOND = "SECOND"


class RejectReason(str, Enum):
    """Machine-readable reason attached to every rejected operation."""

    INVALID_HOURS = "INVALID_HOURS"
    MISSING_DATE = "MISSING_DATE"
    ENTRY_NOT_FOUND = "ENTRY_NOT_FOUND"
    FUTURE_DATE = "FUTURE_DATE"
    FORTNIGHT_CLOSED = "FORTNIGHT_CLOSED"
    DUPLICATE_FOR_DATE = "DUPLICATE_FOR_DATE"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    NOT_PRIVILEGED = "NOT_PRIVILEGED"
    INVALID_FILTER = "INVALID_FILTER"
