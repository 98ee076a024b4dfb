import os

from .config import *  # noqa: F401,F403
from .config import DB_CONFIG as _BASE_DB_CONFIG

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
JWT_REFRESH_SECRET = "test-jwt-refresh-secret"

# Never point tests at the working database.
DB_CONFIG = {**_BASE_DB_CONFIG, "database": os.getenv("TEST_DB_NAME", "dayflow_hrms_test")}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
