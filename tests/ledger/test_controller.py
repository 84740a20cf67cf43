from types import SimpleNamespace

import pytest
from flask import Flask

from src.overtime_bank.overtime_bank.ledger.controller import register
from src.overtime_bank.overtime_bank.ledger.service import LedgerService
from src.overtime_bank.overtime_bank.reports.service import TeamBalanceReportService


@pytest.fixture
def client(ledger_repo, fixed_now):
    app = Flask(__name__)
    app.secret_key = "test"
    container = SimpleNamespace(
        ledger_service=LedgerService(ledger_repo, clock=lambda: fixed_now),
        team_report_service=TeamBalanceReportService(ledger_repo, ledger_repo),
    )
    register(app, container)
    return app.test_client()


def _login(client, agent_id="a1", role="agent"):
    with client.session_transaction() as sess:
        sess["agent_id"] = agent_id
        sess["role"] = role


def test_requires_login(client):
    assert client.get("/bank-hours").status_code == 401


def test_register_then_duplicate(client):
    _login(client)
    resp = client.post("/bank-hours/entries", json={"date": "2024-03-18", "hours": "12", "shift": "day"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["ok"] is True
    assert body["entry"]["note"] == "BH - 18/03/2024 | Diurno 07:00-19:00 (12h)"
    assert body["snapshot"]["balance"] == "12"
    assert body["stale"] is False

    resp = client.post("/bank-hours/entries", json={"date": "2024-03-18", "hours": "4"})
    assert resp.status_code == 409
    assert resp.get_json()["reason"] == "DUPLICATE_FOR_DATE"


def test_register_validation_errors(client):
    _login(client)
    resp = client.post("/bank-hours/entries", json={"date": "2024-03-18", "hours": "zero"})
    assert resp.status_code == 400
    assert resp.get_json()["reason"] == "INVALID_HOURS"

    resp = client.post("/bank-hours/entries", json={"date": "18/03/2024", "hours": "12"})
    assert resp.status_code == 400
    assert resp.get_json()["reason"] == "MISSING_DATE"


def test_agent_cannot_target_another_agent(client, ledger_repo):
    _login(client)
    client.post("/bank-hours/entries", json={"date": "2024-03-18", "hours": "6", "agent_id": "a2"})
    assert ledger_repo.list_entries("a2") == []
    assert len(ledger_repo.list_entries("a1")) == 1


def test_snapshot_and_month_parameter(client, ledger_repo):
    ledger_repo.seed(owner_id="a1", hours="6", note="BH - 20/02/2024 (6h)")
    _login(client)
    body = client.get("/bank-hours?month=2024-02").get_json()
    assert body["month"] == "2024-02"
    assert body["fortnight_totals"]["second_half"]["hours"] == "6"
    assert client.get("/bank-hours?month=02-2024").status_code == 400


def test_check_endpoint(client):
    _login(client)
    body = client.get("/bank-hours/check?date=2024-03-10").get_json()
    assert body["allowed"] is False
    assert body["reason"] == "FORTNIGHT_CLOSED"

    body = client.get("/bank-hours/check?date=2024-03-19&hours=12").get_json()
    assert body["allowed"] is True

    assert client.get("/bank-hours/check").status_code == 400


def test_edit_and_delete_closed_entry(client, ledger_repo):
    entry = ledger_repo.seed(owner_id="a1", hours="12", note="BH - 10/03/2024 (12h)")
    _login(client)
    assert client.patch(f"/bank-hours/entries/{entry.entry_id}", json={"hours": "6"}).status_code == 409
    assert client.delete(f"/bank-hours/entries/{entry.entry_id}").status_code == 409
    assert client.delete("/bank-hours/entries/nope").status_code == 404

    _login(client, role="admin")
    resp = client.patch(f"/bank-hours/entries/{entry.entry_id}", json={"hours": "6"})
    assert resp.status_code == 200
    assert resp.get_json()["entry"]["note"] == "BH - 10/03/2024 (6h)"


def test_admin_routes_require_admin(client):
    _login(client)
    assert client.get("/admin/bank-hours/summary").status_code == 403
    assert client.post("/admin/bank-hours/a1/adjustments", json={"hours": "2"}).status_code == 403


def test_admin_adjust_and_summary(client):
    _login(client, agent_id="boss", role="admin")
    resp = client.post("/admin/bank-hours/a1/adjustments", json={"kind": "debit", "hours": "3"})
    assert resp.status_code == 201
    assert resp.get_json()["entry"]["note"] == "Remoção pelo Admin"

    assert client.post("/admin/bank-hours/a1/adjustments", json={"kind": "bonus", "hours": "3"}).status_code == 400

    body = client.get("/admin/bank-hours/summary?balance=negative").get_json()
    assert [r["owner_id"] for r in body["rows"]] == ["a1"]
    assert body["rows"][0]["balance"] == "-3"
    assert body["owners_negative"] == 1

    assert client.get("/admin/bank-hours/summary?balance=huge").status_code == 400
