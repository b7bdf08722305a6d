import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "event_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_LATE_THRESHOLD_MINUTES = int(os.getenv("DEFAULT_LATE_THRESHOLD_MINUTES", "15"))
ATTENDANCE_CODE_LENGTH = int(os.getenv("ATTENDANCE_CODE_LENGTH", "6"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
