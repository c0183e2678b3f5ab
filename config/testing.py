import os

from .config import DB_CONFIG

SECRET_KEY = "test-secret"

DB_CONFIG = dict(DB_CONFIG, database=os.getenv("DB_NAME", "hr_payroll_test"))

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = False
AUTO_SEED_DB = False
