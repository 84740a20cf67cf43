import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "overtime_bank"),
}

DEBUG = True

# If enabled, app will apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Used when an agent has no bh_hourly_rate / bh_limit of their own.
BH_DEFAULT_HOURLY_RATE = os.getenv("BH_DEFAULT_HOURLY_RATE", "15.75")
BH_DEFAULT_LIMIT = os.getenv("BH_DEFAULT_LIMIT", "70")
