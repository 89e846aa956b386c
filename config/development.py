import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_intranet"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
ANNUAL_LEAVE_DAYS = int(os.getenv("ANNUAL_LEAVE_DAYS", "12"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
