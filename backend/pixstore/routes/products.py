# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/pixstore/routes/products.py
"""
Product catalog routes.

- Read operations on active products are public (the storefront)
- Write operations and the full listing require an admin or owner
"""
from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import db
from ..services import activity_service
from ..services import products_service
from ..models import Product
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
)
from ..decorators import require_auth, require_staff

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "description", "price", "old_price", "image_url",
        "is_active", "is_featured", "tags",
    },
    required_on_create={"name", "description", "price"},
    aliases={
        "oldPrice": "old_price",
        "imageUrl": "image_url",
        "isActive": "is_active",
        "isFeatured": "is_featured",
    },
    ignored_fields={"id", "userId", "user_id", "created_at", "updated_at", "createdAt", "updatedAt"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """Active products, featured first then newest. Public."""
    try:
        products = products_service.list_products()
        return jsonify({"products": [p.to_dict() for p in products]})
    except Exception:
        current_app.logger.exception("Failed to fetch products")
        return jsonify({"error": "Failed to fetch products"}), 500


@products_bp.get("/all")
@require_auth
@require_staff
def list_all_products():
    """Every product including deactivated ones (back office)."""
    try:
        products = products_service.list_products(include_inactive=True)
        return jsonify({"products": [p.to_dict() for p in products]})
    except Exception:
        current_app.logger.exception("Failed to fetch products")
        return jsonify({"error": "Failed to fetch products"}), 500


@products_bp.get("/<int:product_id>")
def get_product(product_id: int):
    try:
        product = products_service.get_product(product_id)
        if product is None:
            return jsonify({"error": "Product not found"}), 404
        return jsonify({"product": product.to_dict()})
    except Exception:
        current_app.logger.exception("Failed to fetch product")
        return jsonify({"error": "Failed to fetch product"}), 500


@products_bp.post("")
@require_auth
@require_staff
def create_product_route():
    """
    Create a new product.

    Required: name, description, price. Optional: old_price, image_url,
    is_active, is_featured, tags.
    """
    try:
        payload = request.get_json(silent=True)
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)

        product = products_service.create_product(patch=patch)

        activity_service.log_activity(
            g.current_user.id,
            "PRODUCT_CREATED",
            {"product_id": product.id, "name": product.name},
        )

        return jsonify({"product": product.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to create product")
        return jsonify({"error": "Failed to create product"}), 500


@products_bp.put("/<int:product_id>")
@require_auth
@require_staff
def update_product_route(product_id: int):
    """Partial update of a product."""
    try:
        payload = request.get_json(silent=True)
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)

        product = products_service.update_product(product_id=product_id, patch=patch)
        if product is None:
            return jsonify({"error": "Product not found"}), 404

        activity_service.log_activity(
            g.current_user.id,
            "PRODUCT_UPDATED",
            {"product_id": product.id, "name": product.name},
        )

        return jsonify({"product": product.to_dict()}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to update product")
        return jsonify({"error": "Failed to update product"}), 500


@products_bp.delete("/<int:product_id>")
@require_auth
@require_staff
def delete_product_route(product_id: int):
    """
    Delete a product.

    Products with payments are deactivated instead, so history keeps
    pointing at them. Unknown ids are a 404.
    """
    try:
        result = products_service.delete_product(product_id=product_id)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to delete product")
        return jsonify({"error": "Failed to delete product"}), 500

    if result is None:
        return jsonify({"error": "Product not found"}), 404

    snapshot, hard_deleted = result
    activity_service.log_activity(
        g.current_user.id,
        "PRODUCT_DELETED",
        {"product_id": product_id, "name": snapshot["name"], "deactivated_only": not hard_deleted},
    )

    return jsonify({"success": True, "deleted": hard_deleted}), 200
