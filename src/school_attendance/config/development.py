import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# "Today" for dashboards and default ranges: UTC, +08:00 or an IANA zone name
REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "UTC")

HALF_DAY_CREDIT = float(os.getenv("HALF_DAY_CREDIT", "0.5"))
SHORT_LEAVE_CREDIT = float(os.getenv("SHORT_LEAVE_CREDIT", "0.75"))
STATS_WINDOW_DAYS = int(os.getenv("STATS_WINDOW_DAYS", "30"))

# (absences within ALERT_WINDOW_DAYS, severity); highest matching row wins
ALERT_WINDOW_DAYS = int(os.getenv("ALERT_WINDOW_DAYS", "30"))
ALERT_THRESHOLDS = [(3, "low"), (5, "medium"), (8, "high")]

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
