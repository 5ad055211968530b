# Overview: Flask API routes for admin operations; parses input and returns JSON responses.

# backend/pixstore/routes/admin.py
"""
Back-office routes.

Provides endpoints for:
- Payment review (pending, history, approve, reject)
- Admin requests (list, approve, reject)
- User management (list; owner-only role and status changes)
- Activity log

All endpoints require authentication and an admin or owner role. The
approver recorded on payments and requests is the authenticated user.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import db
from ..services import activity_service, admin_request_service, payment_service, user_service
from ..validation import ValidationError, json_object, pick
from ..decorators import require_auth, require_owner, require_staff

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


# =============================================================================
# PAYMENTS
# =============================================================================

@admin_bp.get("/payments/pending")
@require_auth
@require_staff
def list_pending_payments():
    try:
        payments = payment_service.list_pending_payments()
        return jsonify({"payments": [p.to_dict(include_relations=True) for p in payments]})
    except Exception:
        current_app.logger.exception("Failed to fetch pending payments")
        return jsonify({"error": "Failed to fetch pending payments"}), 500


@admin_bp.get("/payments/history")
@require_auth
@require_staff
def list_payment_history():
    try:
        payments = payment_service.list_payment_history()
        return jsonify({"payments": [p.to_dict(include_relations=True) for p in payments]})
    except Exception:
        current_app.logger.exception("Failed to fetch payment history")
        return jsonify({"error": "Failed to fetch payment history"}), 500


@admin_bp.put("/payments/<int:payment_id>/approve")
@require_auth
@require_staff
def approve_payment(payment_id: int):
    """
    Approve a payment.

    Not idempotent: approving again re-stamps approved_by and processed_at.
    """
    try:
        payment = payment_service.approve_payment(payment_id, approved_by=g.current_user.id)
        if payment is None:
            return jsonify({"error": "Payment not found"}), 404

        activity_service.log_activity(g.current_user.id, "PAYMENT_APPROVED", {"payment_id": payment_id})

        return jsonify({"payment": payment.to_dict()})
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to approve payment")
        return jsonify({"error": "Failed to approve payment"}), 500


@admin_bp.put("/payments/<int:payment_id>/reject")
@require_auth
@require_staff
def reject_payment(payment_id: int):
    """
    Reject a payment.

    Request body: {"rejection_reason": "..."} (also "rejectionReason")
    """
    try:
        data = json_object(request.get_json(silent=True))
        reason = pick(data, "rejection_reason", "rejectionReason")
        if reason is not None and not isinstance(reason, str):
            return jsonify({"error": "rejection_reason must be a string"}), 400
        if reason is not None:
            reason = reason.strip() or None

        payment = payment_service.reject_payment(payment_id, approved_by=g.current_user.id, reason=reason)
        if payment is None:
            return jsonify({"error": "Payment not found"}), 404

        activity_service.log_activity(g.current_user.id, "PAYMENT_REJECTED", {
            "payment_id": payment_id,
            "reason": reason,
        })

        return jsonify({"payment": payment.to_dict()})
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to reject payment")
        return jsonify({"error": "Failed to reject payment"}), 500


# =============================================================================
# ADMIN REQUESTS
# =============================================================================

@admin_bp.get("/requests")
@require_auth
@require_staff
def list_admin_requests():
    """Pending promotion requests with the requesting user."""
    try:
        requests_ = admin_request_service.list_pending_requests()
        return jsonify({"requests": [r.to_dict(include_user=True) for r in requests_]})
    except Exception:
        current_app.logger.exception("Failed to fetch admin requests")
        return jsonify({"error": "Failed to fetch admin requests"}), 500


@admin_bp.put("/requests/<int:request_id>/approve")
@require_auth
@require_staff
def approve_admin_request(request_id: int):
    try:
        admin_request = admin_request_service.approve_request(request_id, approved_by=g.current_user.id)
        if admin_request is None:
            return jsonify({"error": "Request not found"}), 404

        activity_service.log_activity(g.current_user.id, "ADMIN_REQUEST_APPROVED", {
            "request_id": request_id,
            "new_admin_user_id": admin_request.user_id,
        })

        return jsonify({"request": admin_request.to_dict()})
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to approve admin request")
        return jsonify({"error": "Failed to approve admin request"}), 500


@admin_bp.put("/requests/<int:request_id>/reject")
@require_auth
@require_staff
def reject_admin_request(request_id: int):
    try:
        admin_request = admin_request_service.reject_request(request_id, approved_by=g.current_user.id)
        if admin_request is None:
            return jsonify({"error": "Request not found"}), 404

        activity_service.log_activity(g.current_user.id, "ADMIN_REQUEST_REJECTED", {"request_id": request_id})

        return jsonify({"request": admin_request.to_dict()})
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to reject admin request")
        return jsonify({"error": "Failed to reject admin request"}), 500


# =============================================================================
# USER MANAGEMENT
# =============================================================================

@admin_bp.get("/users")
@require_auth
@require_staff
def list_users():
    try:
        users = user_service.list_users()
        return jsonify({"users": [u.to_dict() for u in users]})
    except Exception:
        current_app.logger.exception("Failed to fetch users")
        return jsonify({"error": "Failed to fetch users"}), 500


@admin_bp.put("/users/<int:user_id>/role")
@require_auth
@require_owner
def change_user_role(user_id: int):
    """
    Promote or demote a user (owner only).

    Request body: {"role": "admin" | "user"}
    Owners cannot be changed and the owner role cannot be granted.
    """
    try:
        data = json_object(request.get_json(silent=True))
        result = user_service.set_role(user_id, data.get("role"))
        if result is None:
            return jsonify({"error": "User not found"}), 404

        user, previous_role = result
        activity_service.log_activity(g.current_user.id, "USER_ROLE_CHANGED", {
            "target_user_id": user.id,
            "from": previous_role,
            "to": user.role,
        })

        return jsonify({"user": user.to_dict()})
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to change user role")
        return jsonify({"error": "Failed to change user role"}), 500


@admin_bp.put("/users/<int:user_id>/active")
@require_auth
@require_owner
def change_user_status(user_id: int):
    """
    Activate or deactivate an account (owner only).

    Request body: {"is_active": bool} (also "isActive")
    Deactivation logs the user out everywhere.
    """
    try:
        data = json_object(request.get_json(silent=True))
        is_active = pick(data, "is_active", "isActive")
        if not isinstance(is_active, bool):
            return jsonify({"error": "is_active must be a boolean"}), 400

        result = user_service.set_active(user_id, is_active, acting_user_id=g.current_user.id)
        if result is None:
            return jsonify({"error": "User not found"}), 404

        user, revoked = result
        activity_service.log_activity(g.current_user.id, "USER_STATUS_CHANGED", {
            "target_user_id": user.id,
            "is_active": user.is_active,
            "sessions_revoked": revoked,
        })

        return jsonify({"user": user.to_dict(), "sessions_revoked": revoked})
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to change user status")
        return jsonify({"error": "Failed to change user status"}), 500


# =============================================================================
# ACTIVITY LOG
# =============================================================================

@admin_bp.get("/logs")
@require_auth
@require_staff
def list_logs():
    """
    Query params:
    - limit: int (default 100, max 500)
    """
    try:
        limit = request.args.get("limit", type=int)
        logs = activity_service.list_activity_logs(limit)
        return jsonify({"logs": [entry.to_dict(include_user=True) for entry in logs]})
    except Exception:
        current_app.logger.exception("Failed to fetch logs")
        return jsonify({"error": "Failed to fetch logs"}), 500
