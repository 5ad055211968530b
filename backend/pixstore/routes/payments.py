# Overview: Flask API routes for payments operations; parses input and returns JSON responses.

# backend/pixstore/routes/payments.py
"""
Customer-facing payment routes.

FLOW:
1. POST /api/payments with a product -> pending payment at the product's price
2. The customer pays the PIX key shown in the store (GET /api/settings/pixKey)
3. POST /api/payments/<id>/upload-proof with the receipt (multipart `proof`)
4. An admin approves or rejects (see routes/admin.py)
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import db
from ..services import activity_service, payment_service, upload_service
from ..services.payment_service import PaymentError
from ..services.upload_service import UploadError
from ..validation import ValidationError, json_object, parse_id, pick
from ..decorators import require_auth


payments_bp = Blueprint("payments", __name__, url_prefix="/api/payments")


@payments_bp.post("")
@require_auth
def create_payment_route():
    """
    Start a purchase.

    Request body:
    {
        "product_id": 12      (also accepted as "productId")
    }

    Returns:
        201: {"payment": {...}}
        400: missing/invalid/out-of-range product id, product not available
        404: product not found
    """
    try:
        data = json_object(request.get_json(silent=True))
        product_id = pick(data, "product_id", "productId")

        if product_id is None:
            return jsonify({"error": "product_id is required"}), 400
        product_id = parse_id(product_id, "product_id")

        try:
            payment = payment_service.create_payment(user_id=g.current_user.id, product_id=product_id)
        except PaymentError as e:
            return jsonify({"error": str(e)}), 400

        if payment is None:
            return jsonify({"error": "Product not found"}), 404

        activity_service.log_activity(g.current_user.id, "PAYMENT_CREATED", {
            "payment_id": payment.id,
            "product_id": payment.product_id,
            "amount": str(payment.amount),
        })

        return jsonify({"payment": payment.to_dict()}), 201

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create payment")
        return jsonify({"error": "Failed to create payment"}), 500


@payments_bp.get("")
@require_auth
def list_my_payments_route():
    """The current user's payments, newest first, with product."""
    try:
        payments = payment_service.list_user_payments(g.current_user.id)
        return jsonify({"payments": [
            {**p.to_dict(), "product": p.product.to_dict() if p.product else None}
            for p in payments
        ]})
    except Exception:
        current_app.logger.exception("Failed to fetch payments")
        return jsonify({"error": "Failed to fetch payments"}), 500


@payments_bp.post("/<int:payment_id>/upload-proof")
@require_auth
def upload_proof_route(payment_id: int):
    """
    Attach a proof of payment (multipart field `proof`).

    Only the payment's owner or staff may upload. The payment status is
    not changed.

    Returns:
        200: {"payment": {...}, "proof_image_url": "/uploads/<name>"}
        400: no file, or not a JPEG/PNG/PDF
        403: payment belongs to someone else
        404: payment not found
        413: file larger than MAX_CONTENT_LENGTH (raised by werkzeug)
    """
    # Outside the try: an oversized body raises RequestEntityTooLarge here
    file = request.files.get("proof")
    if file is None or not file.filename:
        return jsonify({"error": "No file uploaded"}), 400

    try:
        payment = payment_service.get_payment(payment_id)
        if payment is None:
            return jsonify({"error": "Payment not found"}), 404

        user = g.current_user
        if payment.user_id != user.id and not user.is_staff:
            return jsonify({"error": "Permission denied"}), 403

        try:
            proof_url, stored_name = upload_service.save_proof(file)
        except UploadError as e:
            return jsonify({"error": str(e)}), 400

        try:
            payment = payment_service.attach_proof(payment, proof_url)
        except Exception:
            upload_service.discard_proof(stored_name)
            raise

        activity_service.log_activity(payment.user_id, "PAYMENT_PROOF_UPLOADED", {
            "payment_id": payment.id,
            "filename": file.filename,
            "stored_as": stored_name,
        })

        return jsonify({"payment": payment.to_dict(), "proof_image_url": proof_url}), 200

    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to upload proof")
        return jsonify({"error": "Failed to upload proof"}), 500
