from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..core.constants import DEFAULT_BALANCE_CEILING, DEFAULT_HOURLY_RATE
from ..core.enums import RejectReason
from ..core.exceptions import ValidationError
from ..ledger.balance import ZERO, monetary_value, totals_by_kind
from ..ledger.model import OwnerSettings
from ..ledger.repository import LedgerRepository
from .repository import OwnerDirectory


@dataclass(frozen=True)
class TeamBalanceReport:
    rows: list[dict]
    total_balance: Decimal
    total_value: Decimal
    owners_with_balance: int
    owners_negative: int


BALANCE_FILTERS = {"all", "positive", "negative", "zero"}


def _matches_balance(value: Decimal, balance_filter: str) -> bool:
    if balance_filter == "positive":
        return value > 0
    if balance_filter == "negative":
        return value < 0
    if balance_filter == "zero":
        return value == 0
    return True


class TeamBalanceReportService:
    """Admin overview: one row per agent with credits, debits and value."""

    def __init__(
        self,
        ledger: LedgerRepository,
        owners: Optional[OwnerDirectory] = None,
        *,
        default_hourly_rate: Decimal = DEFAULT_HOURLY_RATE,
        default_ceiling: Decimal = DEFAULT_BALANCE_CEILING,
    ):
        self._ledger = ledger
        self._owners = owners
        self._default_hourly_rate = Decimal(default_hourly_rate)
        self._default_ceiling = Decimal(default_ceiling)

    def build_summary(
        self,
        owner_ids: Optional[Iterable[str]] = None,
        *,
        balance_filter: Optional[str] = None,
    ) -> TeamBalanceReport:
        """Stats cover every owner; ``balance_filter`` (positive|negative|zero) only trims rows."""
        balance_filter = balance_filter or "all"
        if balance_filter not in BALANCE_FILTERS:
            raise ValidationError(f"Filtro de saldo inválido: {balance_filter}", reason=RejectReason.INVALID_FILTER)
        if owner_ids is None:
            if self._owners is None:
                raise ValidationError("Nenhum agente informado")
            owner_ids = self._owners.list_active_owner_ids()

        rows: list[dict] = []
        total_balance = ZERO
        total_value = ZERO
        positive = 0
        negative = 0

        for owner_id in owner_ids:
            entries = list(self._ledger.list_entries(owner_id))
            settings = (self._ledger.get_owner_settings(owner_id) or OwnerSettings()).with_defaults(
                hourly_rate=self._default_hourly_rate,
                balance_ceiling=self._default_ceiling,
            )
            totals = totals_by_kind(entries)
            value = monetary_value(totals.balance, settings.hourly_rate)

            total_balance += totals.balance
            total_value += value
            if totals.balance > 0:
                positive += 1
            elif totals.balance < 0:
                negative += 1

            if not _matches_balance(totals.balance, balance_filter):
                continue

            rows.append(
                {
                    "owner_id": owner_id,
                    "total_credits": totals.credits,
                    "total_debits": totals.debits,
                    "balance": totals.balance,
                    "hourly_rate": settings.hourly_rate,
                    "balance_ceiling": settings.balance_ceiling,
                    "estimated_value": value,
                    # list_entries is most-recent first
                    "last_entry_at": entries[0].created_at if entries else None,
                }
            )

        rows.sort(key=lambda r: r["balance"], reverse=True)
        return TeamBalanceReport(
            rows=rows,
            total_balance=total_balance,
            total_value=total_value,
            owners_with_balance=positive,
            owners_negative=negative,
        )
