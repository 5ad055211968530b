from __future__ import annotations

from ..extensions import db
from pixstore.time_utils import to_utc_z, utcnow

PIX_KEY_SETTING = "pixKey"


class SystemSetting(db.Model):
    """Key/value store-wide setting (JSON value). Written with upsert semantics."""
    __tablename__ = "system_settings"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), nullable=False, unique=True, index=True)
    value = db.Column(db.JSON, nullable=True)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    updated_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    updater = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "updated_at": to_utc_z(self.updated_at),
            "updated_by": self.updated_by,
        }


class WarningBanner(db.Model):
    """Banner message shown to every visitor while active."""
    __tablename__ = "warnings"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    message = db.Column(db.Text, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    creator = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "is_active": self.is_active,
            "created_by": self.created_by,
            "created_at": to_utc_z(self.created_at),
        }
