import os

_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module() -> str:
    # APP_ENV picks the settings module; anything unknown runs as development
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _MODULES.get(env, "config.development")
