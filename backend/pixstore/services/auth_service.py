# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

WHY: Every action must be attributable. Uses bcrypt for password hashing.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Minimum length from PASSWORD_MIN_LENGTH; bcrypt caps input at 72 bytes
- Usernames are trimmed and lowercased before lookup and storage
- Session tokens managed separately (see session_service.py)
"""

from __future__ import annotations

from dataclasses import dataclass

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User
from ..models.auth import ROLES, ROLE_USER
from ..validation import ConflictError, ValidationError
from pixstore.time_utils import utcnow

BCRYPT_MAX_BYTES = 72
USERNAME_MAX_LENGTH = 64


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


@dataclass
class LoginAttempt:
    """
    Outcome of a credential check.

    user is set whenever the username matched an account, even if the
    password was wrong, so failures can be attributed in the activity log.
    """
    user: User | None
    success: bool
    reason: str | None = None


def normalize_username(username: str | None) -> str:
    return (username or "").strip().lower()


def validate_password_strength(password: str) -> None:
    min_length = current_app.config.get("PASSWORD_MIN_LENGTH", 6)
    if not isinstance(password, str) or len(password) < min_length:
        raise PasswordValidationError(f"Password must be at least {min_length} characters long")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise PasswordValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=current_app.config.get("BCRYPT_ROUNDS", 12))
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() is timing-safe. Malformed hashes verify as False.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def reserved_usernames() -> set[str]:
    """Bootstrap account names cannot be claimed through self-registration."""
    cfg = current_app.config
    return {
        normalize_username(cfg.get("OWNER_USERNAME")),
        normalize_username(cfg.get("ADMIN_USERNAME")),
    } - {""}


def get_user_by_username(username: str) -> User | None:
    return db.session.query(User).filter_by(username=normalize_username(username)).first()


def create_user(username: str, password: str, role: str = ROLE_USER) -> User:
    """
    Create a user with a bcrypt password hash.

    Raises:
        ValidationError: blank/oversized username or unknown role
        PasswordValidationError: password doesn't meet requirements
        ConflictError: username already taken
    """
    username = normalize_username(username)
    if not username:
        raise ValidationError("Username is required")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username exceeds max length {USERNAME_MAX_LENGTH}")
    if role not in ROLES:
        raise ValidationError(f"Invalid role: {role}")

    if get_user_by_username(username):
        raise ConflictError("Username already exists")

    user = User(username=username, password_hash=hash_password(password), role=role, is_active=True)
    db.session.add(user)
    db.session.commit()
    return user


def register_user(username: str, password: str) -> User:
    """Self-registration: always creates a plain `user`."""
    if normalize_username(username) in reserved_usernames():
        raise ValidationError("This username is reserved")
    return create_user(username, password, role=ROLE_USER)


def authenticate(username: str, password: str, ip_address: str | None = None) -> LoginAttempt:
    """
    Check credentials and stamp last_login_at / ip_address on success.

    Inactive accounts are treated exactly like unknown ones.
    """
    user = get_user_by_username(username)
    if not user or not user.is_active:
        return LoginAttempt(user=None, success=False, reason="User not found")

    if not verify_password(password, user.password_hash):
        return LoginAttempt(user=user, success=False, reason="Invalid password")

    user.last_login_at = utcnow()
    user.ip_address = ip_address
    db.session.commit()
    return LoginAttempt(user=user, success=True)
