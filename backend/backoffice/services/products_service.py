# backend/backoffice/services/products_service.py
"""
Products Service

Each mutation commits first and then appends an audit entry (best effort,
see transaction_service.py).
"""
from __future__ import annotations

from ..extensions import db
from ..models import Product
from .common import apply_patch, get_or_404
from .transaction_service import record_transaction

# created_at is set on insert and never patched
PRODUCT_MUTABLE_FIELDS = {"name", "description", "price", "stock", "category", "size", "barcode"}

NOT_FOUND_MESSAGE = "Product not found"


def list_products(barcode: str | None = None) -> list[dict]:
    """
    All products ordered by id, optionally narrowed to one barcode
    (exact match, used by the scanner lookup).
    """
    query = db.session.query(Product)
    if barcode:
        query = query.filter(Product.barcode == barcode)
    return [p.to_dict() for p in query.order_by(Product.id.asc()).all()]


def list_low_stock_products(threshold: int) -> list[dict]:
    products = (
        db.session.query(Product)
        .filter(Product.stock <= threshold)
        .order_by(Product.stock.asc(), Product.id.asc())
        .all()
    )
    return [p.to_dict() for p in products]


def create_product(*, patch: dict, actor: str | None = None) -> dict:
    """Create product from a validated patch dict."""
    p = Product()
    apply_patch(p, patch, PRODUCT_MUTABLE_FIELDS)

    db.session.add(p)
    db.session.commit()

    record_transaction(
        username=actor,
        action="Product Added",
        description=f"Product '{p.name}' added (stock {p.stock}, price {p.price:.2f})",
    )
    return p.to_dict()


def update_product(*, product_id: int, patch: dict, actor: str | None = None) -> dict:
    """
    Merge the validated patch into the stored product.

    Raises:
        NotFoundError: no product with product_id
    """
    p = get_or_404(Product, product_id, NOT_FOUND_MESSAGE)

    apply_patch(p, patch, PRODUCT_MUTABLE_FIELDS)
    db.session.commit()

    record_transaction(
        username=actor,
        action="Product Updated",
        description=f"Product '{p.name}' updated (fields: {', '.join(sorted(patch.keys())) or 'none'})",
    )
    return p.to_dict()


def delete_product(*, product_id: int, actor: str | None = None) -> None:
    """
    Hard delete. Invoices keep their own copy of line descriptions, so
    nothing else references the row.
    """
    p = get_or_404(Product, product_id, NOT_FOUND_MESSAGE)
    name = p.name

    db.session.delete(p)
    db.session.commit()

    record_transaction(
        username=actor,
        action="Product Deleted",
        description=f"Product '{name}' deleted",
    )
