# backend/pixstore/services/products_service.py
"""
Products Service

Catalog reads and admin CRUD. Products referenced by payments are never
hard-deleted; they are deactivated so payment history keeps its product.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Payment, Product
from pixstore.time_utils import utcnow

PRODUCT_MUTABLE_FIELDS = {
    "name", "description", "price", "old_price", "image_url",
    "is_active", "is_featured", "tags",
}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def list_products(include_inactive: bool = False) -> list[Product]:
    """Featured first, then newest first."""
    query = db.session.query(Product)
    if not include_inactive:
        query = query.filter(Product.is_active.is_(True))
    return query.order_by(
        Product.is_featured.desc(),
        Product.created_at.desc(),
        Product.id.desc(),
    ).all()


def get_product(product_id: int, include_inactive: bool = False) -> Product | None:
    product = db.session.get(Product, product_id)
    if product is None:
        return None
    if not include_inactive and not product.is_active:
        return None
    return product


def create_product(*, patch: dict) -> Product:
    """Create product using a validated patch dict."""
    now = utcnow()
    product = Product(created_at=now, updated_at=now, tags=[])
    apply_product_patch(product, patch)
    db.session.add(product)
    db.session.commit()
    return product


def update_product(*, product_id: int, patch: dict) -> Product | None:
    """Returns the updated product, or None if it doesn't exist."""
    product = db.session.get(Product, product_id)
    if product is None:
        return None

    apply_product_patch(product, patch)
    product.updated_at = utcnow()
    db.session.commit()
    return product


def delete_product(*, product_id: int) -> tuple[dict, bool] | None:
    """
    Delete a product.

    Returns (product_snapshot, hard_deleted) or None if it doesn't exist.
    A product with payments is deactivated instead (hard_deleted=False).
    """
    product = db.session.get(Product, product_id)
    if product is None:
        return None

    has_payments = db.session.query(Payment.id).filter_by(product_id=product_id).first() is not None
    if has_payments:
        product.is_active = False
        product.updated_at = utcnow()
        db.session.commit()
        return product.to_dict(), False

    snapshot = product.to_dict()
    db.session.delete(product)
    db.session.commit()
    return snapshot, True
