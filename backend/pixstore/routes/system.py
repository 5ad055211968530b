# backend/pixstore/routes/system.py
"""
System endpoints: health check, first-run bootstrap and uploaded proofs.
"""

import time
from flask import Blueprint, current_app, jsonify, send_from_directory
from ..extensions import db
from ..models import Product, User
from ..services import bootstrap_service
from ..services.upload_service import upload_folder
from ..time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        user_count = db.session.query(User).count()
        product_count = db.session.query(Product).count()

        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "users": user_count,
                "products": product_count,
            }
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/api/health")
def health():
    """
    Returns:
    - 200: database reachable
    - 503: database unreachable
    """
    database_health = check_database_health()
    http_status = 503 if database_health["status"] == "unhealthy" else 200

    return {
        "status": database_health["status"],
        "timestamp": to_utc_z(utcnow()),
        "checks": {"database": database_health},
    }, http_status


@system_bp.post("/api/init")
def init_store():
    """
    HTTP twin of `flask store init`.

    Disabled (404) unless INIT_ENDPOINT_ENABLED is set, so a deployed store
    can't be re-seeded by anonymous callers.
    """
    if not current_app.config.get("INIT_ENDPOINT_ENABLED"):
        return jsonify({"error": "Not found"}), 404

    try:
        summary = bootstrap_service.initialize_store()
        return jsonify({"success": True, **summary})
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Store initialization failed")
        return jsonify({"error": "Store initialization failed"}), 500


@system_bp.get("/uploads/<path:filename>")
def serve_upload(filename: str):
    return send_from_directory(upload_folder(), filename)
