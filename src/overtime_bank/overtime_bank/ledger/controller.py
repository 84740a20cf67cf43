from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date, parse_iso_month
from ..core.enums import EntryKind, RejectReason, Role
from ..core.exceptions import StoreError, ValidationError
from ..container import Container
from .model import LedgerEntry, get_shift_preset
from .service import OperationResult

logger = logging.getLogger(__name__)

REASON_STATUS = {
    RejectReason.NOT_PRIVILEGED: 403,
    RejectReason.ENTRY_NOT_FOUND: 404,
}


def _entry_dict(entry: Optional[LedgerEntry]) -> Optional[dict]:
    if entry is None:
        return None
    return {
        "id": entry.entry_id,
        "owner_id": entry.owner_id,
        "hours": str(entry.hours),
        "kind": entry.kind.value,
        "note": entry.note,
        "created_at": entry.created_at.isoformat(),
    }


def _result_response(result: OperationResult, *, created: bool = False):
    if not result.ok:
        status = REASON_STATUS.get(result.reason, 400 if result.is_validation_error else 409)
        return jsonify({"ok": False, "reason": result.reason.value, "message": result.message}), status

    body = {
        "ok": True,
        "entry": _entry_dict(result.entry),
        "snapshot": result.snapshot.as_dict() if result.snapshot else None,
        # Write applied but the re-read failed: the client must refetch.
        "stale": result.refresh_error is not None,
    }
    return jsonify(body), 201 if created else 200


def _store_unavailable(e: StoreError):
    logger.error("Ledger store failure: %s", e)
    return jsonify({"ok": False, "message": "Erro ao acessar o banco de horas"}), 503


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "agent_id" not in session:
                return jsonify({"ok": False, "message": "Faça login para continuar"}), 401
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "agent_id" not in session:
                return jsonify({"ok": False, "message": "Faça login para continuar"}), 401
            if session.get("role") != Role.ADMIN.value:
                return jsonify({"ok": False, "reason": RejectReason.NOT_PRIVILEGED.value}), 403
            return view(*args, **kwargs)

        return wrapper

    def _is_privileged() -> bool:
        return session.get("role") == Role.ADMIN.value

    def _target_owner(payload: Optional[dict] = None) -> str:
        # Admins may act on any agent's ledger; agents only on their own.
        requested = request.args.get("agent_id") or (payload or {}).get("agent_id")
        if requested and _is_privileged():
            return str(requested)
        return str(session["agent_id"])

    def _parse_work_date(value) -> Optional[date]:
        if not value:
            return None
        try:
            return parse_iso_date(str(value))
        except ValueError:
            raise ValidationError("Data inválida (YYYY-MM-DD)", reason=RejectReason.MISSING_DATE)

    def _bad_request(e: ValidationError):
        return jsonify({"ok": False, "reason": e.reason.value if e.reason else None, "message": str(e)}), 400

    @app.route("/bank-hours", methods=["GET"], endpoint="bank_hours")
    @login_required
    def bank_hours():
        try:
            month_s = request.args.get("month")
            month_anchor = parse_iso_month(month_s) if month_s else None
        except ValueError:
            return jsonify({"ok": False, "message": "Mês inválido (YYYY-MM)"}), 400

        try:
            snapshot = container.ledger_service.snapshot(
                _target_owner(),
                is_privileged=_is_privileged(),
                month_anchor=month_anchor,
            )
        except StoreError as e:
            return _store_unavailable(e)
        return jsonify(snapshot.as_dict())

    @app.route("/bank-hours/check", methods=["GET"], endpoint="bank_hours_check")
    @login_required
    def bank_hours_check():
        try:
            work_date = _parse_work_date(request.args.get("date"))
            if work_date is None:
                raise ValidationError("Selecione uma data", reason=RejectReason.MISSING_DATE)
            hours = request.args.get("hours")
            decision = container.ledger_service.preview_registration(
                _target_owner(),
                work_date,
                hours=hours if hours else None,
                is_privileged=_is_privileged(),
            )
        except ValidationError as e:
            return _bad_request(e)
        except StoreError as e:
            return _store_unavailable(e)

        return jsonify(
            {
                "allowed": decision.allowed,
                "reason": decision.reason.value if decision.reason else None,
                "message": decision.message,
            }
        )

    @app.route("/bank-hours/entries", methods=["POST"], endpoint="bank_hours_register")
    @login_required
    def bank_hours_register():
        payload = request.get_json(silent=True) or {}
        try:
            work_date = _parse_work_date(payload.get("date"))
            shift_key = payload.get("shift")
            result = container.ledger_service.register(
                _target_owner(payload),
                work_date,
                payload.get("hours"),
                shift=get_shift_preset(shift_key) if shift_key else None,
                is_privileged=_is_privileged(),
            )
        except ValidationError as e:
            return _bad_request(e)
        except StoreError as e:
            return _store_unavailable(e)
        return _result_response(result, created=True)

    @app.route("/bank-hours/entries/<entry_id>", methods=["PATCH"], endpoint="bank_hours_edit")
    @login_required
    def bank_hours_edit(entry_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            result = container.ledger_service.edit(
                _target_owner(payload),
                entry_id,
                payload.get("hours"),
                is_privileged=_is_privileged(),
            )
        except StoreError as e:
            return _store_unavailable(e)
        return _result_response(result)

    @app.route("/bank-hours/entries/<entry_id>", methods=["DELETE"], endpoint="bank_hours_delete")
    @login_required
    def bank_hours_delete(entry_id: str):
        try:
            result = container.ledger_service.delete(
                _target_owner(),
                entry_id,
                is_privileged=_is_privileged(),
            )
        except StoreError as e:
            return _store_unavailable(e)
        return _result_response(result)

    @app.route("/admin/bank-hours/<owner_id>/adjustments", methods=["POST"], endpoint="admin_bank_hours_adjust")
    @admin_required
    def admin_bank_hours_adjust(owner_id: str):
        payload = request.get_json(silent=True) or {}
        try:
            kind = EntryKind(str(payload.get("kind") or EntryKind.CREDIT.value).lower())
        except ValueError:
            return jsonify({"ok": False, "message": "Tipo de lançamento inválido"}), 400

        try:
            result = container.ledger_service.adjust(
                owner_id,
                payload.get("hours"),
                kind,
                is_privileged=_is_privileged(),
                description=payload.get("description"),
            )
        except StoreError as e:
            return _store_unavailable(e)
        return _result_response(result, created=True)

    @app.route("/admin/bank-hours/summary", methods=["GET"], endpoint="admin_bank_hours_summary")
    @admin_required
    def admin_bank_hours_summary():
        owner_ids = request.args.getlist("agent_id") or None
        try:
            report = container.team_report_service.build_summary(
                owner_ids,
                balance_filter=request.args.get("balance"),
            )
        except ValidationError as e:
            return _bad_request(e)
        except StoreError as e:
            return _store_unavailable(e)

        rows = [
            {
                **r,
                "total_credits": str(r["total_credits"]),
                "total_debits": str(r["total_debits"]),
                "balance": str(r["balance"]),
                "hourly_rate": str(r["hourly_rate"]),
                "balance_ceiling": str(r["balance_ceiling"]),
                "estimated_value": str(r["estimated_value"]),
                "last_entry_at": r["last_entry_at"].isoformat() if r["last_entry_at"] else None,
            }
            for r in report.rows
        ]
        return jsonify(
            {
                "rows": rows,
                "total_balance": str(report.total_balance),
                "total_value": str(report.total_value),
                "owners_with_balance": report.owners_with_balance,
                "owners_negative": report.owners_negative,
            }
        )
