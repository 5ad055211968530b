# Overview: Request and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import session_service
from .models.auth import ROLE_ADMIN, ROLE_OWNER


def _is_authenticated() -> bool:
    return hasattr(g, 'current_user')


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def require_auth(f):
    """
    Require a valid bearer session.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.session_token: The SessionToken row

    Returns 401 if the header is missing, the token is invalid or expired,
    or the account has been deactivated.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = bearer_token()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        session = session_service.validate_session(token)
        if not session:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_user = session.user
        g.session_token = session

        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: str):
    """
    Require the current user to hold one of `roles`.

    Must be stacked under @require_auth.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            if g.current_user.role not in roles:
                return jsonify({
                    "error": "Permission denied",
                    "required_role": list(roles),
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


require_staff = require_role(ROLE_ADMIN, ROLE_OWNER)
require_owner = require_role(ROLE_OWNER)
