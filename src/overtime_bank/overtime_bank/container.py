from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .core.constants import DEFAULT_BALANCE_CEILING, DEFAULT_HOURLY_RATE
from .database.connection import DBConfig, DatabaseConnection
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.service import LedgerService
from .reports.service import TeamBalanceReportService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    ledger_repo: MySQLLedgerRepository

    ledger_service: LedgerService
    team_report_service: TeamBalanceReportService


def build_container(
    *,
    db_config: dict,
    default_hourly_rate: Decimal = DEFAULT_HOURLY_RATE,
    default_ceiling: Decimal = DEFAULT_BALANCE_CEILING,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    ledger_repo = MySQLLedgerRepository(conn)

    ledger_service = LedgerService(
        ledger_repo,
        default_hourly_rate=default_hourly_rate,
        default_ceiling=default_ceiling,
    )
    team_report_service = TeamBalanceReportService(
        ledger_repo,
        ledger_repo,
        default_hourly_rate=default_hourly_rate,
        default_ceiling=default_ceiling,
    )

    return Container(
        conn=conn,
        ledger_repo=ledger_repo,
        ledger_service=ledger_service,
        team_report_service=team_report_service,
    )
