"""
Application configuration — environment-aware settings.

All environment variables are documented here. A local .env file is loaded
when present.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent


class BaseConfig:
    # Core Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-key-change-in-production")
    # Single embedded SQLite file
    DATABASE = os.environ.get("DATABASE", str(BASE_DIR / "somatext.db"))

    # Server
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "3000"))

    # Generative-content oracle (Gemini)
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "") or os.environ.get("GOOGLE_API_KEY", "")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview")
    ORACLE_MAX_ATTEMPTS = int(os.environ.get("ORACLE_MAX_ATTEMPTS", "1"))  # 1 = no retry

    # Logging
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "json" or "text"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Server-side sessions hold the role toggle and the running quiz
    SESSION_TYPE = os.environ.get("SESSION_TYPE", "filesystem")
    SESSION_PERMANENT = False
    SESSION_KEY_PREFIX = "somatext:"
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")


class ProductionConfig(BaseConfig):
    DEBUG = False
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json")

    @classmethod
    def validate(cls):
        """Fail fast on missing or insecure configuration in production."""
        errors: list[str] = []

        if cls.SECRET_KEY in ("dev-key-change-in-production", ""):
            errors.append("SECRET_KEY must be set to a secure value in production.")

        if cls.ORACLE_MAX_ATTEMPTS < 1:
            errors.append("ORACLE_MAX_ATTEMPTS must be at least 1.")

        if not cls.GEMINI_API_KEY:
            warnings.warn("GEMINI_API_KEY is not set; quiz and lesson features will be unavailable.")

        if errors:
            raise RuntimeError(
                "Production configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            )


class TestingConfig(BaseConfig):
    TESTING = True
    GEMINI_API_KEY = ""


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
