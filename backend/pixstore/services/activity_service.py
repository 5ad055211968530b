# Overview: Service-layer operations for the activity log; encapsulates business logic and database work.

"""
Activity Log Service

Every mutating operation records who did what, from where. Writes are
best-effort: a failed audit insert is logged server-side and rolled back,
never surfaced to the caller and never retried.
"""

from __future__ import annotations

from flask import current_app, has_request_context, request
from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models import ActivityLog


def get_client_ip() -> str | None:
    """First X-Forwarded-For hop when behind a proxy, else the socket address."""
    if not has_request_context():
        return None
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()[:45]
    return request.remote_addr


def get_user_agent() -> str | None:
    if not has_request_context():
        return None
    ua = request.headers.get("User-Agent")
    return ua[:512] if ua else None


def log_activity(user_id: int | None, action: str, details: dict | None = None) -> ActivityLog | None:
    """
    Append an activity row for the current request.

    Commits on its own; callers should have committed their primary write
    first so that a rollback here cannot undo it.

    Returns the row, or None if the write failed.
    """
    try:
        entry = ActivityLog(
            user_id=user_id,
            action=action,
            details=details or {},
            ip_address=get_client_ip(),
            user_agent=get_user_agent(),
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    except Exception:
        db.session.rollback()
        current_app.logger.warning("Failed to log activity %s", action, exc_info=True)
        return None


def list_activity_logs(limit: int | None = None) -> list[ActivityLog]:
    """Newest first, with the acting user eagerly loaded."""
    default_limit = current_app.config.get("ACTIVITY_LOG_DEFAULT_LIMIT", 100)
    max_limit = current_app.config.get("ACTIVITY_LOG_MAX_LIMIT", 500)
    if not limit or limit < 1:
        limit = default_limit
    limit = min(limit, max_limit)

    return (
        db.session.query(ActivityLog)
        .options(joinedload(ActivityLog.user))
        .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(limit)
        .all()
    )
