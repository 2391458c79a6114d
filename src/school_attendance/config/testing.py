import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

REPORT_TIMEZONE = "UTC"

HALF_DAY_CREDIT = 0.5
SHORT_LEAVE_CREDIT = 0.75
STATS_WINDOW_DAYS = 30

ALERT_WINDOW_DAYS = 30
ALERT_THRESHOLDS = [(3, "low"), (5, "medium"), (8, "high")]

AUTO_INIT_DB = False
AUTO_SEED_DB = False
