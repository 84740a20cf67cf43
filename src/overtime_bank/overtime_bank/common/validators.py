from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ..core.enums import RejectReason
from ..core.exceptions import ValidationError

# overtime_bank.hours is DECIMAL(10, 2)
HOURS_QUANTUM = Decimal("0.01")


def require_positive_hours(value: object) -> Decimal:
    """Coerce hours into Decimal and reject zero/negative/garbage input.

    At most two decimal places, so the stored value matches the note suffix.
    """

    try:
        hours = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("Informe uma quantidade válida de horas", reason=RejectReason.INVALID_HOURS)

    if not hours.is_finite() or hours <= 0:
        raise ValidationError("Informe uma quantidade válida de horas", reason=RejectReason.INVALID_HOURS)
    if hours != hours.quantize(HOURS_QUANTUM):
        raise ValidationError("Use no máximo duas casas decimais para as horas", reason=RejectReason.INVALID_HOURS)
    return hours


def format_hours(value: Decimal) -> str:
    """Render hours without trailing zeros: 12 -> '12', 7.50 -> '7.5'."""

    return f"{value.normalize():f}"
