from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import HIGH_BALANCE_ALERT_RATIO, NEAR_LIMIT_RATIO
from ..core.enums import EntryKind


@dataclass(frozen=True)
class LimitUsage:
    balance: Decimal
    ceiling: Decimal
    progress_percent: Decimal
    near_limit: bool
    at_limit: bool
    high_balance_alert: bool

    def as_dict(self) -> dict:
        return {
            "balance": str(self.balance),
            "ceiling": str(self.ceiling),
            "progress_percent": str(self.progress_percent),
            "near_limit": self.near_limit,
            "at_limit": self.at_limit,
            "high_balance_alert": self.high_balance_alert,
        }


def can_add(hours: Decimal, current_balance: Decimal, ceiling: Decimal) -> bool:
    return current_balance + hours <= ceiling


def can_edit(
    old_hours: Decimal,
    new_hours: Decimal,
    current_balance: Decimal,
    entry_kind: EntryKind,
    ceiling: Decimal,
) -> bool:
    # Debit edits always pass; credit edits check only the delta against the ceiling.
    if entry_kind != EntryKind.CREDIT:
        return True
    return can_add(new_hours - old_hours, current_balance, ceiling)


def limit_usage(balance: Decimal, ceiling: Decimal) -> LimitUsage:
    if ceiling > 0:
        percent = min(balance / ceiling * 100, Decimal("100"))
    else:
        percent = Decimal("100")
    percent = max(percent, Decimal("0")).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return LimitUsage(
        balance=balance,
        ceiling=ceiling,
        progress_percent=percent,
        near_limit=balance >= ceiling * NEAR_LIMIT_RATIO,
        at_limit=balance >= ceiling,
        high_balance_alert=balance >= ceiling * HIGH_BALANCE_ALERT_RATIO,
    )
