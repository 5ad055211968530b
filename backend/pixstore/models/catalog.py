from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from pixstore.time_utils import to_utc_z, utcnow


def money(value: Decimal | None) -> str | None:
    """Decimal -> "12.34" for JSON; None passes through."""
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


class Product(db.Model):
    """
    Catalog entry.

    There is no stock tracking: price and availability (is_active) are the
    only dynamic fields. Inactive products are hidden from the storefront.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_active_featured", "is_active", "is_featured"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    old_price = db.Column(db.Numeric(10, 2), nullable=True)
    image_url = db.Column(db.String(500), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    tags = db.Column(db.JSON, nullable=True, default=list)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": money(self.price),
            "old_price": money(self.old_price),
            "image_url": self.image_url,
            "is_active": self.is_active,
            "is_featured": self.is_featured,
            "tags": list(self.tags or []),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
