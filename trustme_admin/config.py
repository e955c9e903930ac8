import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "trustme-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///trustme.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "production" turns on the Secure flag of the session cookie
    APP_ENV = os.getenv("APP_ENV", "development")

    # Bootstrap admin, created on first login or via `flask seed-admin`
    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
    ADMIN_FULL_NAME = os.getenv("ADMIN_FULL_NAME", "Super Admin")

    # Session cookie
    ADMIN_SESSION_COOKIE = "admin_session"
    ADMIN_SESSION_MAX_AGE = 60 * 60 * 24 * 7

    # Dashboard
    STATS_FANOUT_WORKERS = int(os.getenv("STATS_FANOUT_WORKERS", 6))
    RECENT_ORDERS_LIMIT = 5
    STORE_RECENT_ORDERS_LIMIT = 20

    # Reject order/payment status values outside the known enumerations
    STRICT_STATUS_VALUES = _env_flag("STRICT_STATUS_VALUES")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    APP_ENV = "testing"
    STRICT_STATUS_VALUES = False
    # In-memory SQLite shares one connection, so keep dashboard reads on it
    STATS_FANOUT_WORKERS = 1
