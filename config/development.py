import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# "memory" keeps everything in-process; "mysql" uses DB_CONFIG
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_attendance"),
}

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

STANDARD_HOURS_PER_DAY = os.getenv("STANDARD_HOURS_PER_DAY", "8")
WEEKEND_TOIL_POLICY = os.getenv("WEEKEND_TOIL_POLICY", "full_hours")

# Comma-separated YYYY-MM-DD dates; work on these earns full TOIL
HOLIDAYS = [d.strip() for d in os.getenv("HOLIDAYS", "").split(",") if d.strip()]

TOIL_EXPIRY_DAYS = int(os.getenv("TOIL_EXPIRY_DAYS", "21"))
TOIL_EXPIRING_WINDOW_DAYS = int(os.getenv("TOIL_EXPIRING_WINDOW_DAYS", "7"))

GPS_TIMEOUT_SECONDS = float(os.getenv("GPS_TIMEOUT_SECONDS", "15"))
GPS_WORKERS = int(os.getenv("GPS_WORKERS", "8"))

GEOCODER_ENABLED = bool(int(os.getenv("GEOCODER_ENABLED", "0")))
GEOCODER_TIMEOUT_SECONDS = float(os.getenv("GEOCODER_TIMEOUT_SECONDS", "3"))

SCHEDULER_ENABLED = bool(int(os.getenv("SCHEDULER_ENABLED", "1")))
SWEEP_INTERVAL_SECONDS = int(os.getenv("SWEEP_INTERVAL_SECONDS", "60"))

SESSION_TTL_MINUTES = int(os.getenv("SESSION_TTL_MINUTES", "15"))
SESSION_CLEANUP_MINUTES = int(os.getenv("SESSION_CLEANUP_MINUTES", "5"))

# Optional "HH:MM"; check-ins after start + grace are "late"
WORKDAY_START = os.getenv("WORKDAY_START", "")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
