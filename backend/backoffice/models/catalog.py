from __future__ import annotations

from ..extensions import db
from ..time_utils import utc_today


class Product(db.Model):
    """
    Catalog entry with its on-hand stock.

    created_at is a calendar date assigned at insert and never written again.
    barcode holds the code a scanner emits for this product (optional).
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_barcode", "barcode"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Float, nullable=False)
    stock = db.Column(db.Integer, nullable=False)
    category = db.Column(db.String(120), nullable=True)
    size = db.Column(db.String(64), nullable=True)
    barcode = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.Date, nullable=False, default=utc_today)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} stock={self.stock}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
            "stock": int(self.stock) if self.stock is not None else None,
            "category": self.category,
            "size": self.size,
            "barcode": self.barcode,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class Category(db.Model):
    __tablename__ = "categories"
    __table_args__ = (
        db.UniqueConstraint("name", name="uq_categories_name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
