# Overview: Service-layer operations for maintenance; encapsulates business logic and database work.

from __future__ import annotations

from datetime import timedelta

from ..extensions import db
from ..models import ActivityLog
from pixstore.time_utils import utcnow


def cleanup_activity_logs(*, retention_days: int = 365) -> int:
    """Delete activity log rows older than retention_days."""
    cutoff = utcnow() - timedelta(days=retention_days)
    deleted = db.session.query(ActivityLog).filter(
        ActivityLog.created_at < cutoff
    ).delete(synchronize_session=False)
    db.session.commit()
    return deleted
