"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LEAVE_GRANTS = {"casual": 12.0, "sick": 10.0, "paid": 15.0}
DEFAULT_PAYROLL_DAILY_DIVISOR = 30

MIN_LEAVE_DAYS = 0.5
DASHBOARD_RECENT_LIMIT = 10
LEAVE_LIST_LIMIT = 100

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
