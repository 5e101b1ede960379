import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "cardhub_db"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", "24"))

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:3000")
BACKEND_TIMEOUT = float(os.getenv("BACKEND_TIMEOUT", "10"))
VISIT_WORKERS = int(os.getenv("VISIT_WORKERS", "8"))
AGGREGATE_WORKERS = int(os.getenv("AGGREGATE_WORKERS", "16"))
