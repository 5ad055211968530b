# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/pixstore/routes/auth.py
"""
Authentication API routes

- Self-registration of plain `user` accounts
- Login returns a bearer token for protected routes
- Failed logins answer with a generic message; the activity log keeps the
  actual reason
- Users can ask to be promoted to admin
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..extensions import db
from ..models import User
from ..services import activity_service, admin_request_service, auth_service, session_service
from ..services.admin_request_service import AdminRequestError
from ..services.auth_service import PasswordValidationError
from ..validation import ConflictError, ValidationError, json_object, parse_id, pick
from ..decorators import bearer_token, require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register_route():
    """
    Create a `user` account.

    Request body: {"username": "...", "password": "..."}

    Returns:
        201: {"user": {...}}
        400: missing fields, reserved username, weak password
        409: username already exists
    """
    try:
        data = json_object(request.get_json(silent=True))
        username = data.get("username")
        password = data.get("password")

        if not isinstance(username, str) or not isinstance(password, str) or not username.strip():
            return jsonify({"error": "Username and password are required"}), 400

        try:
            user = auth_service.register_user(username, password)
        except ConflictError as e:
            return jsonify({"error": str(e)}), 409
        except (ValidationError, PasswordValidationError) as e:
            return jsonify({"error": str(e)}), 400

        activity_service.log_activity(user.id, "USER_REGISTERED", {})

        return jsonify({"user": user.to_dict()}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to register user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Token must be included in Authorization header for protected routes.
    Unknown user, inactive user and wrong password all return the same 401.
    """
    try:
        data = json_object(request.get_json(silent=True))
        username = data.get("username")
        password = data.get("password")

        if not username or not password or not isinstance(username, str) or not isinstance(password, str):
            return jsonify({"error": "Username and password are required"}), 400

        ip_address = activity_service.get_client_ip()
        user_agent = activity_service.get_user_agent()

        attempt = auth_service.authenticate(username, password, ip_address=ip_address)

        if not attempt.success:
            details = {"reason": attempt.reason}
            if attempt.user is None:
                details["username"] = username
            activity_service.log_activity(
                attempt.user.id if attempt.user else None,
                "LOGIN_FAILED",
                details,
            )
            return jsonify({"error": "Invalid credentials"}), 401

        user = attempt.user
        activity_service.log_activity(user.id, "LOGIN_SUCCESS", {})

        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=user_agent,
            ip_address=ip_address,
        )

        return jsonify({
            "user": user.to_dict(),
            "token": token,
            "session": session.to_dict(),
            "message": "Login successful"
        }), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
def logout_route():
    """
    Revoke session token (logout).

    Expects Authorization header: Bearer <token>
    """
    try:
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authorization header required"}), 401

        session = session_service.validate_session(token)
        if not session:
            return jsonify({"error": "Invalid or expired token"}), 401

        user_id = session.user_id
        session_service.revoke_session(token, reason="User logout")
        activity_service.log_activity(user_id, "LOGOUT", {})

        return jsonify({"message": "Logout successful"}), 200

    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to logout user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/me")
@require_auth
def me_route():
    """Current user for a still-valid token."""
    return jsonify({"user": g.current_user.to_dict()}), 200


@auth_bp.post("/request-admin")
@require_auth
def request_admin_route():
    """
    File a request to be promoted to admin.

    The requester is the authenticated user. A `userId`/`user_id` in the
    body is accepted for older clients but must match the session.

    Returns:
        201: {"request": {...}}
        400: already staff, a request is already pending, or a bad user id
        403: body names a different user
        404: named user doesn't exist
    """
    try:
        data = json_object(request.get_json(silent=True))
        body_user_id = pick(data, "user_id", "userId")

        user = g.current_user
        if body_user_id is not None:
            target = db.session.get(User, parse_id(body_user_id, "user_id"))
            if target is None:
                return jsonify({"error": "User not found"}), 404
            if target.id != user.id:
                return jsonify({"error": "Cannot request admin for another user"}), 403

        try:
            admin_request = admin_request_service.create_admin_request(user)
        except AdminRequestError as e:
            return jsonify({"error": str(e)}), 400

        activity_service.log_activity(user.id, "ADMIN_REQUEST_CREATED", {"request_id": admin_request.id})

        return jsonify({"request": admin_request.to_dict()}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create admin request")
        return jsonify({"error": "Internal server error"}), 500
