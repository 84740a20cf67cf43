"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_HOURLY_RATE = Decimal("15.75")
DEFAULT_BALANCE_CEILING = Decimal("70")

DATE_MARKER_LABEL = "BH"
FIRST_HALF_LAST_DAY = 15
DEFAULT_TREND_MONTHS = 6

NEAR_LIMIT_RATIO = Decimal("0.8")
HIGH_BALANCE_ALERT_RATIO = Decimal("0.9")

ADMIN_CREDIT_NOTE = "Adição pelo Admin"
ADMIN_DEBIT_NOTE = "Remoção pelo Admin"
