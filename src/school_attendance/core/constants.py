"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_TREND_DAYS = 7
DEFAULT_STATS_WINDOW_DAYS = 30
DEFAULT_TOP_PERFORMERS_LIMIT = 10
DEFAULT_ALERT_LIMIT = 10
DEFAULT_PATTERN_WEEKS = 4
DEFAULT_PORTAL_HISTORY_DAYS = 30

UNKNOWN_DEPARTMENT = "Unknown"
TEACHER_CODE_PREFIX = "T"
TEACHER_CODE_WIDTH = 3

# Upper bounds for query-string counts
MAX_TREND_DAYS = 3660
MAX_PATTERN_WEEKS = 520
MAX_LIST_LIMIT = 1000
