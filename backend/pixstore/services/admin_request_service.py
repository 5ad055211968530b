# Overview: Service-layer operations for admin requests; encapsulates business logic and database work.

"""
Admin Request Service

LIFECYCLE: pending -> approved | rejected, same shape as payments.
Approving a request also sets the requesting user's role to admin. There
is no check for users deactivated or promoted by another path since the
request was filed.
"""

from __future__ import annotations

from sqlalchemy.orm import joinedload

from ..extensions import db
from ..models import AdminRequest, User
from ..models.auth import ROLE_ADMIN, ROLE_OWNER, ROLE_USER
from ..models.payments import STATUS_APPROVED, STATUS_PENDING, STATUS_REJECTED
from pixstore.time_utils import utcnow


class AdminRequestError(Exception):
    """Raised when a user cannot file an admin request (400-level)."""
    pass


def create_admin_request(user: User) -> AdminRequest:
    """
    File a pending request for `user` to become admin.

    Raises:
        AdminRequestError: user is already staff, or has a pending request
    """
    if user.role != ROLE_USER:
        raise AdminRequestError("User already has elevated privileges")

    existing = db.session.query(AdminRequest).filter_by(
        user_id=user.id,
        status=STATUS_PENDING,
    ).first()
    if existing:
        raise AdminRequestError("Admin request already pending")

    request_row = AdminRequest(user_id=user.id, requested_role=ROLE_ADMIN, status=STATUS_PENDING)
    db.session.add(request_row)
    db.session.commit()
    return request_row


def list_pending_requests() -> list[AdminRequest]:
    return (
        db.session.query(AdminRequest)
        .join(User, AdminRequest.user_id == User.id)
        .options(joinedload(AdminRequest.user))
        .filter(AdminRequest.status == STATUS_PENDING)
        .order_by(AdminRequest.created_at.desc(), AdminRequest.id.desc())
        .all()
    )


def _process(request_id: int, status: str, approved_by: int | None) -> AdminRequest | None:
    request_row = db.session.get(AdminRequest, request_id)
    if request_row is None:
        return None

    request_row.status = status
    request_row.approved_by = approved_by
    request_row.processed_at = utcnow()

    if status == STATUS_APPROVED:
        user = db.session.get(User, request_row.user_id)
        # owners are never demoted through this path
        if user is not None and user.role != ROLE_OWNER:
            user.role = request_row.requested_role

    db.session.commit()
    return request_row


def approve_request(request_id: int, approved_by: int | None) -> AdminRequest | None:
    """Mark approved and promote the user. None if the request doesn't exist."""
    return _process(request_id, STATUS_APPROVED, approved_by)


def reject_request(request_id: int, approved_by: int | None) -> AdminRequest | None:
    return _process(request_id, STATUS_REJECTED, approved_by)
