import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "UTC")

HALF_DAY_CREDIT = float(os.getenv("HALF_DAY_CREDIT", "0.5"))
SHORT_LEAVE_CREDIT = float(os.getenv("SHORT_LEAVE_CREDIT", "0.75"))
STATS_WINDOW_DAYS = int(os.getenv("STATS_WINDOW_DAYS", "30"))

ALERT_WINDOW_DAYS = int(os.getenv("ALERT_WINDOW_DAYS", "30"))
ALERT_THRESHOLDS = [(3, "low"), (5, "medium"), (8, "high")]

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
