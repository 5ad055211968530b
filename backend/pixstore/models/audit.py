from __future__ import annotations

from ..extensions import db
from pixstore.time_utils import to_utc_z, utcnow


class ActivityLog(db.Model):
    """
    Audit trail of user and admin actions.

    IMMUTABLE: Never update or delete from application code. Rows are only
    pruned by the maintenance CLI.
    """
    __tablename__ = "activity_logs"
    __table_args__ = (
        db.Index("ix_activity_logs_user_action", "user_id", "action"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)  # Nullable for anonymous
    action = db.Column(db.String(64), nullable=False, index=True)  # LOGIN_FAILED, PAYMENT_APPROVED, ...
    details = db.Column(db.JSON, nullable=True)

    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    user = db.relationship("User", backref=db.backref("activity_logs", lazy=True))

    def to_dict(self, include_user: bool = False) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "action": self.action,
            "details": self.details,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": to_utc_z(self.created_at),
        }
        if include_user:
            data["user"] = self.user.to_dict() if self.user else None
        return data
