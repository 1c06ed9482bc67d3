# backend/backoffice/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored next to the working directory unless DATABASE_URL is set
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///backoffice.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # File stores. None means "inside the Flask instance folder" (resolved in create_app)
    AVATAR_UPLOAD_DIR = os.environ.get("AVATAR_UPLOAD_DIR")
    USER_PROFILES_FILE = os.environ.get("USER_PROFILES_FILE")

    # bcrypt cost factor; tests lower this to keep hashing fast
    BCRYPT_LOG_ROUNDS = int(os.environ.get("BCRYPT_LOG_ROUNDS", "12"))

    # Audit trail
    AUDIT_DEFAULT_USERNAME = os.environ.get("AUDIT_DEFAULT_USERNAME", "System User")
    AUDIT_TIMESTAMP_FORMAT = "%d.%m.%Y %H:%M:%S"

    LOW_STOCK_THRESHOLD = int(os.environ.get("LOW_STOCK_THRESHOLD", "10"))

    CORS_ALLOWED_ORIGINS = {
        origin.strip()
        for origin in os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    }
