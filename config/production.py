import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "overtime_bank"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

BH_DEFAULT_HOURLY_RATE = os.getenv("BH_DEFAULT_HOURLY_RATE", "15.75")
BH_DEFAULT_LIMIT = os.getenv("BH_DEFAULT_LIMIT", "70")
