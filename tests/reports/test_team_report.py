from decimal import Decimal

import pytest

from src.overtime_bank.overtime_bank.core.enums import EntryKind, RejectReason
from src.overtime_bank.overtime_bank.core.exceptions import ValidationError
from src.overtime_bank.overtime_bank.ledger.model import OwnerSettings
from src.overtime_bank.overtime_bank.reports.service import TeamBalanceReportService


@pytest.fixture
def seeded(ledger_repo):
    ledger_repo.seed(owner_id="a1", hours="12", note="BH - 18/03/2024 (12h)")
    ledger_repo.seed(owner_id="a1", hours="2", kind=EntryKind.DEBIT, note="Remoção pelo Admin")
    ledger_repo.seed(owner_id="a2", hours="5", kind=EntryKind.DEBIT, note="Remoção pelo Admin")
    ledger_repo.seed(owner_id="a3", hours="30", note="BH - 19/03/2024 (30h)")
    ledger_repo.set_settings("a3", OwnerSettings(hourly_rate=Decimal("20")))
    ledger_repo.set_settings("a4", OwnerSettings())
    return ledger_repo


def test_summary_rows_sorted_by_balance(seeded):
    report = TeamBalanceReportService(seeded, seeded).build_summary()

    assert [r["owner_id"] for r in report.rows] == ["a3", "a1", "a4", "a2"]
    a1 = next(r for r in report.rows if r["owner_id"] == "a1")
    assert a1["total_credits"] == Decimal("12")
    assert a1["total_debits"] == Decimal("2")
    assert a1["balance"] == Decimal("10")
    assert a1["estimated_value"] == Decimal("157.50")
    assert a1["last_entry_at"] is not None

    a4 = next(r for r in report.rows if r["owner_id"] == "a4")
    assert a4["last_entry_at"] is None
    assert a4["balance_ceiling"] == Decimal("70")

    assert report.total_balance == Decimal("35")
    assert report.total_value == Decimal("600.00") + Decimal("157.50") - Decimal("78.75")
    assert report.owners_with_balance == 2
    assert report.owners_negative == 1


def test_filter_trims_rows_but_not_stats(seeded):
    report = TeamBalanceReportService(seeded, seeded).build_summary(balance_filter="negative")
    assert [r["owner_id"] for r in report.rows] == ["a2"]
    assert report.owners_with_balance == 2
    assert report.total_balance == Decimal("35")

    zero = TeamBalanceReportService(seeded, seeded).build_summary(balance_filter="zero")
    assert [r["owner_id"] for r in zero.rows] == ["a4"]


def test_explicit_owner_ids_skip_directory(seeded):
    report = TeamBalanceReportService(seeded).build_summary(["a1"])
    assert [r["owner_id"] for r in report.rows] == ["a1"]


def test_invalid_filter_and_missing_directory(seeded):
    with pytest.raises(ValidationError) as exc:
        TeamBalanceReportService(seeded, seeded).build_summary(balance_filter="huge")
    assert exc.value.reason == RejectReason.INVALID_FILTER

    with pytest.raises(ValidationError):
        TeamBalanceReportService(seeded).build_summary()
