# backend/royalcare/routes/system.py
"""
Service banner, health check, and read-only serving of attachment files.
"""

import time
from flask import Blueprint, jsonify, send_from_directory, current_app, abort
from sqlalchemy import text

from ..extensions import db
from ..services.blob_store import get_blob_store

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except Exception:
        db.session.rollback()
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/")
def root():
    return jsonify({"status": "OK", "message": "RoyalCare Backend Server is running"}), 200


@system_bp.get("/health")
def health():
    database = check_database_health()
    status_code = 200 if database["status"] == "healthy" else 503
    return jsonify({"status": database["status"], "checks": {"database": database}}), status_code


@system_bp.get("/uploads/<filename>")
def serve_upload(filename: str):
    blob_store = get_blob_store()
    if not blob_store.exists(filename):
        abort(404)
    return send_from_directory(blob_store.root, filename)
