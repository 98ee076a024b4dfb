"""Shared settings read from the environment.

``development``, ``testing`` and ``production`` import everything from here
and override what differs.
"""
import os
from decimal import Decimal


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dayflow-dev-secret"

    # DB config
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "dayflow_hrms")

    # Tokens
    JWT_SECRET = os.environ.get("JWT_SECRET") or SECRET_KEY
    JWT_REFRESH_SECRET = os.environ.get("JWT_REFRESH_SECRET") or (JWT_SECRET + "-refresh")
    JWT_ACCESS_MINUTES = int(os.environ.get("JWT_ACCESS_MINUTES", "15"))
    JWT_REFRESH_DAYS = int(os.environ.get("JWT_REFRESH_DAYS", "7"))

    # Dev helpers
    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))
    AUTO_SEED_DB = bool(int(os.environ.get("AUTO_SEED_DB", "0")))


SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

DEBUG = bool(int(os.environ.get("DEBUG", "0")))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

API_PREFIX = os.environ.get("API_PREFIX", "/api/v1")

JWT_SECRET = Config.JWT_SECRET
JWT_REFRESH_SECRET = Config.JWT_REFRESH_SECRET
JWT_ACCESS_MINUTES = Config.JWT_ACCESS_MINUTES
JWT_REFRESH_DAYS = Config.JWT_REFRESH_DAYS

# Business settings
ANNUAL_LEAVE_ALLOWANCE = int(os.environ.get("ANNUAL_LEAVE_ALLOWANCE", "20"))
TAX_RATE = Decimal(os.environ.get("TAX_RATE", "0.10"))
DEFAULT_PAYMENT_METHOD = os.environ.get("DEFAULT_PAYMENT_METHOD", "Bank Transfer")
COMPANY_NAME = os.environ.get("COMPANY_NAME", "DayFlow Inc.")
COMPANY_ADDRESS = os.environ.get("COMPANY_ADDRESS", "123 Business St, City, State 12345")

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = Config.AUTO_SEED_DB

# First HR account created by AUTO_SEED_DB / scripts/seed_db.py
SEED_HR_EMPLOYEE_ID = os.environ.get("SEED_HR_EMPLOYEE_ID", "HR001")
SEED_HR_EMAIL = os.environ.get("SEED_HR_EMAIL", "hr@dayflow.local")
SEED_HR_PASSWORD = os.environ.get("SEED_HR_PASSWORD", "ChangeMe123")
