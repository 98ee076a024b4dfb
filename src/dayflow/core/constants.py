"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

API_PREFIX = "/api/v1"

DEFAULT_ACCESS_TOKEN_MINUTES = 15
DEFAULT_REFRESH_TOKEN_DAYS = 7

ANNUAL_LEAVE_ALLOWANCE = 20
MIN_LEAVE_REASON_LENGTH = 10

FULL_DAY_HOURS = 8
HALF_DAY_HOURS = 4

DEFAULT_TAX_RATE = Decimal("0.10")
DEFAULT_PAYMENT_METHOD = "Bank Transfer"

# Default page sizes per listing
MY_ATTENDANCE_PAGE_SIZE = 31
ALL_ATTENDANCE_PAGE_SIZE = 50
MY_LEAVES_PAGE_SIZE = 10
ALL_LEAVES_PAGE_SIZE = 20
MY_PAYROLL_PAGE_SIZE = 12
ALL_PAYROLL_PAGE_SIZE = 20
EMPLOYEES_PAGE_SIZE = 10
MAX_PAGE_SIZE = 200

RECENT_NOTIFICATIONS_LIMIT = 5
RECENT_LEAVES_LIMIT = 5
ATTENDANCE_TREND_MONTHS = 6
