# Overview: Service-layer operations for product categories.

from __future__ import annotations

from ..extensions import db
from ..errors import ConflictError
from ..models import Category
from .common import commit_or_conflict, get_or_404
from .transaction_service import record_transaction

DUPLICATE_MESSAGE = "Category already exists"


def list_categories() -> list[dict]:
    rows = db.session.query(Category).order_by(Category.id.asc()).all()
    return [c.to_dict() for c in rows]


def create_category(*, patch: dict, actor: str | None = None) -> dict:
    """
    Names are unique and compared case-sensitively, so "Shoes" and "shoes"
    can coexist.

    Raises:
        ConflictError: a category with the same name exists
    """
    name = patch["name"]

    existing = db.session.query(Category).filter(Category.name == name).first()
    if existing:
        raise ConflictError(DUPLICATE_MESSAGE)

    c = Category(name=name)
    db.session.add(c)
    # Another writer may insert the same name between the check and the commit
    commit_or_conflict(DUPLICATE_MESSAGE)

    record_transaction(username=actor, action="Category Added", description=f"Category '{c.name}' added")
    return c.to_dict()


def delete_category(*, category_id: int, actor: str | None = None) -> None:
    """
    Products keep their category text; categories are a pick list, not a
    foreign key.
    """
    c = get_or_404(Category, category_id, "Category not found")
    name = c.name

    db.session.delete(c)
    db.session.commit()

    record_transaction(username=actor, action="Category Deleted", description=f"Category '{name}' deleted")
