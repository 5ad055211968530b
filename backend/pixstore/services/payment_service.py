# Overview: Service-layer operations for payments; encapsulates business logic and database work.

"""
Manual PIX Payment Service

LIFECYCLE:
    pending -> approved | rejected

A user creates a pending payment for a product, pays the shared PIX key
outside the system and uploads a proof. An admin then approves or rejects.

Processing is a single conditional update: there is no locking and no
guard against processing twice. A second approval simply stamps
approved_by and processed_at again. The approver's privilege is checked
by the HTTP layer, not here.
"""

from __future__ import annotations

from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models import Payment, Product, User
from ..models.payments import (
    PROCESSED_STATUSES,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    STATUSES,
)
from pixstore.time_utils import utcnow


class PaymentError(Exception):
    """Raised for payment business-rule violations (400-level)."""
    pass


def create_payment(*, user_id: int, product_id: int) -> Payment | None:
    """
    Create a pending payment for product_id at its current price.

    Returns None if the product doesn't exist.

    Raises:
        PaymentError: product is not available for purchase
    """
    product = db.session.get(Product, product_id)
    if product is None:
        return None
    if not product.is_active:
        raise PaymentError("Product is not available")

    payment = Payment(
        user_id=user_id,
        product_id=product.id,
        amount=product.price,
        status=STATUS_PENDING,
    )
    db.session.add(payment)
    db.session.commit()
    return payment


def get_payment(payment_id: int) -> Payment | None:
    return db.session.get(Payment, payment_id)


def list_user_payments(user_id: int) -> list[Payment]:
    return (
        db.session.query(Payment)
        .options(joinedload(Payment.product))
        .filter(Payment.user_id == user_id)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )


def list_pending_payments() -> list[Payment]:
    """Pending payments with user and product, newest first."""
    return (
        db.session.query(Payment)
        .join(User, Payment.user_id == User.id)
        .join(Product, Payment.product_id == Product.id)
        .options(joinedload(Payment.user), joinedload(Payment.product))
        .filter(Payment.status == STATUS_PENDING)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )


def list_payment_history() -> list[Payment]:
    """Approved and rejected payments, most recently processed first."""
    return (
        db.session.query(Payment)
        .join(User, Payment.user_id == User.id)
        .join(Product, Payment.product_id == Product.id)
        .options(joinedload(Payment.user), joinedload(Payment.product))
        .filter(Payment.status.in_(PROCESSED_STATUSES))
        .order_by(Payment.processed_at.desc(), Payment.id.desc())
        .all()
    )


def update_payment_status(
    payment_id: int,
    status: str,
    approved_by: int | None,
    rejection_reason: str | None = None,
) -> Payment | None:
    """
    Set status, approver, reason and processed_at in one write.

    Returns None if the payment doesn't exist.
    """
    if status not in STATUSES:
        raise PaymentError(f"Invalid payment status: {status}")

    payment = db.session.get(Payment, payment_id)
    if payment is None:
        return None

    payment.status = status
    payment.approved_by = approved_by
    payment.rejection_reason = rejection_reason
    payment.processed_at = utcnow()
    db.session.commit()
    return payment


def approve_payment(payment_id: int, approved_by: int | None) -> Payment | None:
    return update_payment_status(payment_id, STATUS_APPROVED, approved_by)


def reject_payment(payment_id: int, approved_by: int | None, reason: str | None) -> Payment | None:
    return update_payment_status(payment_id, STATUS_REJECTED, approved_by, reason)


def attach_proof(payment: Payment, proof_image_url: str) -> Payment:
    """Record the uploaded proof; status is left untouched."""
    payment.proof_image_url = proof_image_url
    db.session.commit()
    return payment
