# backend/pixstore/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/pixstore.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///pixstore.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Proof-of-payment uploads (werkzeug enforces MAX_CONTENT_LENGTH with a 413)
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", "uploads")
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(5 * 1024 * 1024)))

    CORS_ORIGINS = {
        o.strip()
        for o in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000",
        ).split(",")
        if o.strip()
    }

    SESSION_ABSOLUTE_TIMEOUT_HOURS = int(os.environ.get("SESSION_ABSOLUTE_TIMEOUT_HOURS", "24"))
    SESSION_IDLE_TIMEOUT_HOURS = int(os.environ.get("SESSION_IDLE_TIMEOUT_HOURS", "2"))

    PASSWORD_MIN_LENGTH = int(os.environ.get("PASSWORD_MIN_LENGTH", "6"))
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    ACTIVITY_LOG_DEFAULT_LIMIT = 100
    ACTIVITY_LOG_MAX_LIMIT = 500

    # Bootstrap accounts and PIX key. Change these before exposing the store.
    OWNER_USERNAME = os.environ.get("OWNER_USERNAME", "owner")
    OWNER_PASSWORD = os.environ.get("OWNER_PASSWORD", "change-me-owner")
    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "change-me-admin")
    DEFAULT_PIX_KEY = os.environ.get("DEFAULT_PIX_KEY", "pix-key@example.com")

    # POST /api/init mirrors `flask store init`; off unless explicitly enabled
    INIT_ENDPOINT_ENABLED = _env_bool("INIT_ENDPOINT_ENABLED")
