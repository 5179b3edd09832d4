# backend/royalcare/config.py
from __future__ import annotations
import os


BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///royalcare.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Attachment blobs live here and are served back under /uploads/<name>
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", os.path.join(BACKEND_DIR, "uploads"))
    MAX_UPLOAD_FILES = int(os.environ.get("MAX_UPLOAD_FILES", "10"))
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_UPLOAD_MB", "50")) * 1024 * 1024

    # Name registered in services.claims_service.RESOLVERS
    CLAIMS_RESOLVER = os.environ.get("CLAIMS_RESOLVER", "headers")

    CORS_ALLOWED_ORIGINS = _split_origins(os.environ.get("CORS_ALLOWED_ORIGINS", "*"))

    ATTACHMENT_WRITE_ATTEMPTS = 5
