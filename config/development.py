import os

from .config import DB_CONFIG

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = dict(DB_CONFIG)

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also upsert the demo admin/employee on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
