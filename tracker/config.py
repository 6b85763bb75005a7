"""
Engineering Project Tracker
Configuration classes for the Flask app factory.

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name]())
"""

import os
import secrets

# Generate a random key for development; production MUST use a stable env var
_DEV_SECRET = secrets.token_hex(32)


def _default_backend():
    return "gsheets" if os.getenv("GOOGLE_SPREADSHEET_ID") else "memory"


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", _DEV_SECRET)
    DEBUG = False
    TESTING = False

    # Signed session tokens (default 24h)
    SESSION_EXPIRES = int(os.getenv("SESSION_EXPIRES", "86400"))
    SESSION_TOKEN_COOKIE = "session_token"
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Row store
    ROW_STORE_BACKEND = os.getenv("ROW_STORE_BACKEND", _default_backend())
    GOOGLE_SPREADSHEET_ID = os.getenv("GOOGLE_SPREADSHEET_ID")
    GOOGLE_SERVICE_ACCOUNT_EMAIL = os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL")
    GOOGLE_PRIVATE_KEY = os.getenv("GOOGLE_PRIVATE_KEY")

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Rate limiting (login only)
    RATELIMIT_STORAGE_URI = os.getenv("REDIS_URL", "memory://")
    LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10 per minute")

    # Test-user seeding endpoints under /api/setup
    SETUP_ENABLED = os.getenv("SETUP_ENABLED", "false").lower() == "true"


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    SETUP_ENABLED = os.getenv("SETUP_ENABLED", "true").lower() == "true"


class TestingConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    ROW_STORE_BACKEND = "memory"
    SECRET_KEY = "testing-secret-key"
    BCRYPT_ROUNDS = 4
    RATELIMIT_ENABLED = False
    SETUP_ENABLED = True


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")  # Must be set explicitly in production
    SESSION_COOKIE_SECURE = True

    def __init__(self):
        if not os.getenv("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY environment variable must be set in production")
        if self.ROW_STORE_BACKEND == "gsheets" and not self.GOOGLE_SPREADSHEET_ID:
            raise RuntimeError("GOOGLE_SPREADSHEET_ID environment variable is required in production")


# Configuration mapping: environment name -> config class
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
