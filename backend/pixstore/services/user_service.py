# Overview: Service-layer operations for user administration; encapsulates business logic and database work.

from __future__ import annotations

from ..extensions import db
from ..models import User
from ..models.auth import ROLE_ADMIN, ROLE_OWNER, ROLE_USER
from ..validation import ValidationError
from . import session_service

ASSIGNABLE_ROLES = (ROLE_ADMIN, ROLE_USER)


def list_users() -> list[User]:
    """Newest accounts first."""
    return db.session.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def get_user(user_id: int) -> User | None:
    return db.session.get(User, user_id)


def set_role(user_id: int, role: str) -> tuple[User, str] | None:
    """
    Promote or demote between admin and user.

    Returns (user, previous_role) or None if the user doesn't exist.

    Raises:
        ValidationError: role not assignable, or target is an owner
    """
    if role not in ASSIGNABLE_ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ASSIGNABLE_ROLES)}")

    user = db.session.get(User, user_id)
    if user is None:
        return None
    if user.role == ROLE_OWNER:
        raise ValidationError("Owner role cannot be changed")

    previous = user.role
    user.role = role
    db.session.commit()
    return user, previous


def set_active(user_id: int, is_active: bool, acting_user_id: int) -> tuple[User, int] | None:
    """
    Activate or deactivate an account.

    Deactivation revokes every live session of the user.
    Returns (user, sessions_revoked) or None if the user doesn't exist.
    """
    user = db.session.get(User, user_id)
    if user is None:
        return None
    if user.id == acting_user_id:
        raise ValidationError("Cannot change your own account status")
    if user.role == ROLE_OWNER:
        raise ValidationError("Owner accounts cannot be deactivated")

    user.is_active = is_active
    revoked = 0
    if not is_active:
        revoked = session_service.revoke_all_user_sessions(
            user_id=user.id,
            reason="Account deactivated by owner",
        )
    db.session.commit()
    return user, revoked
