import os

from .config import *  # noqa: F401,F403

# No fallbacks: create_app refuses to start while any of these is unset.
SECRET_KEY = os.getenv("SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET")
JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET")
REQUIRED_SECRETS = ("SECRET_KEY", "JWT_SECRET", "JWT_REFRESH_SECRET")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
