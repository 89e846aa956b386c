import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_intranet"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
ANNUAL_LEAVE_DAYS = int(os.getenv("ANNUAL_LEAVE_DAYS", "12"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
