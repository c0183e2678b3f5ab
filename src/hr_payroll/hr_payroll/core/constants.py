"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STANDARD_MONTHLY_HOURS = 160
MAX_OVERTIME_HOURS = 40
REGULAR_DAY_HOURS = 8
OVERTIME_MULTIPLIER = 1.5

DEFAULT_SESSION_DAYS = 7
DEFAULT_NOTIFICATION_LIMIT = 50
MIN_PASSWORD_LENGTH = 6

MIN_YEAR = 1
MAX_YEAR = 9999

DEFAULT_PAGE_SIZE = 10
DASHBOARD_RECENT_NOTIFICATIONS = 5
DASHBOARD_UPCOMING_LEAVES = 3
