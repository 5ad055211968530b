from __future__ import annotations

from ..extensions import db
from .catalog import money
from pixstore.time_utils import to_utc_z, utcnow

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)
PROCESSED_STATUSES = (STATUS_APPROVED, STATUS_REJECTED)


class Payment(db.Model):
    """
    Manual PIX payment for one product.

    Lifecycle: pending -> approved | rejected. Processing is a plain update
    stamped with the approver and processed_at; nothing prevents a second
    approval from overwriting the first.
    """
    __tablename__ = "payments"
    __table_args__ = (
        db.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_payments_status"),
        db.Index("ix_payments_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING)

    proof_image_url = db.Column(db.String(500), nullable=True)
    rejection_reason = db.Column(db.Text, nullable=True)
    approved_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    processed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    user = db.relationship("User", foreign_keys=[user_id], backref=db.backref("payments", lazy=True))
    product = db.relationship("Product", backref=db.backref("payments", lazy=True))
    approver = db.relationship("User", foreign_keys=[approved_by])

    def to_dict(self, include_relations: bool = False) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "product_id": self.product_id,
            "amount": money(self.amount),
            "status": self.status,
            "proof_image_url": self.proof_image_url,
            "rejection_reason": self.rejection_reason,
            "approved_by": self.approved_by,
            "created_at": to_utc_z(self.created_at),
            "processed_at": to_utc_z(self.processed_at) if self.processed_at else None,
        }
        if include_relations:
            data["user"] = self.user.to_dict() if self.user else None
            data["product"] = self.product.to_dict() if self.product else None
        return data


class AdminRequest(db.Model):
    """
    A user's request to be promoted to admin.

    Same pending/approved/rejected shape as Payment. Approval also sets the
    requesting user's role.
    """
    __tablename__ = "admin_requests"
    __table_args__ = (
        db.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_admin_requests_status"),
        db.CheckConstraint("requested_role IN ('admin')", name="ck_admin_requests_role"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    requested_role = db.Column(db.String(16), nullable=False, default="admin")
    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING, index=True)
    approved_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    processed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    user = db.relationship("User", foreign_keys=[user_id], backref=db.backref("admin_requests", lazy=True))
    approver = db.relationship("User", foreign_keys=[approved_by])

    def to_dict(self, include_user: bool = False) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "requested_role": self.requested_role,
            "status": self.status,
            "approved_by": self.approved_by,
            "created_at": to_utc_z(self.created_at),
            "processed_at": to_utc_z(self.processed_at) if self.processed_at else None,
        }
        if include_user:
            data["user"] = self.user.to_dict() if self.user else None
        return data
