# Overview: Flask API routes for settings and warning banners; parses input and returns JSON responses.

# backend/pixstore/routes/settings.py
"""
Store settings and warning banners.

The storefront reads settings (the PIX key) and active warnings without
logging in. Writes are admin/owner only.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import db
from ..services import activity_service, settings_service
from ..validation import ValidationError, json_object, pick
from ..decorators import require_auth, require_staff


settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")
warnings_bp = Blueprint("warnings", __name__, url_prefix="/api/warnings")


@settings_bp.get("/<key>")
def get_setting_route(key: str):
    """A single setting, or {"setting": null} when it was never set."""
    try:
        setting = settings_service.get_setting(key)
        return jsonify({"setting": setting.to_dict() if setting else None})
    except Exception:
        current_app.logger.exception("Failed to fetch setting")
        return jsonify({"error": "Failed to fetch setting"}), 500


@settings_bp.get("")
@require_auth
@require_staff
def list_settings_route():
    try:
        settings = settings_service.list_settings()
        return jsonify({"settings": [s.to_dict() for s in settings]})
    except Exception:
        current_app.logger.exception("Failed to fetch settings")
        return jsonify({"error": "Failed to fetch settings"}), 500


@settings_bp.post("")
@require_auth
@require_staff
def upsert_setting_route():
    """
    Create or overwrite a setting.

    Request body: {"key": "pixKey", "value": <any JSON>}
    """
    try:
        data = json_object(request.get_json(silent=True))
        if "value" not in data:
            return jsonify({"error": "value is required"}), 400

        setting = settings_service.set_setting(data.get("key"), data["value"], updated_by=g.current_user.id)
        activity_service.log_activity(g.current_user.id, "SETTING_UPDATED", {"key": setting.key})

        return jsonify({"setting": setting.to_dict()})
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to update setting")
        return jsonify({"error": "Failed to update setting"}), 500


@warnings_bp.get("")
def list_warnings_route():
    """Active banners, newest first. Public."""
    try:
        warnings = settings_service.list_active_warnings()
        return jsonify({"warnings": [w.to_dict() for w in warnings]})
    except Exception:
        current_app.logger.exception("Failed to fetch warnings")
        return jsonify({"error": "Failed to fetch warnings"}), 500


@warnings_bp.post("")
@require_auth
@require_staff
def create_warning_route():
    try:
        data = json_object(request.get_json(silent=True))
        warning = settings_service.create_warning(data.get("message"), created_by=g.current_user.id)
        activity_service.log_activity(g.current_user.id, "WARNING_CREATED", {"warning_id": warning.id})

        return jsonify({"warning": warning.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create warning")
        return jsonify({"error": "Failed to create warning"}), 500


@warnings_bp.put("/<int:warning_id>")
@require_auth
@require_staff
def update_warning_route(warning_id: int):
    """
    Edit or toggle a banner.

    Request body: {"message": "...", "is_active": bool} (both optional;
    "isActive" also accepted)
    """
    try:
        data = json_object(request.get_json(silent=True))
        warning = settings_service.update_warning(
            warning_id,
            message=data.get("message"),
            is_active=pick(data, "is_active", "isActive"),
        )
        if warning is None:
            return jsonify({"error": "Warning not found"}), 404

        activity_service.log_activity(g.current_user.id, "WARNING_UPDATED", {
            "warning_id": warning.id,
            "is_active": warning.is_active,
        })

        return jsonify({"warning": warning.to_dict()})
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to update warning")
        return jsonify({"error": "Failed to update warning"}), 500
