# Overview: Service-layer operations for expenses.

from __future__ import annotations

from ..extensions import db
from ..models import Expense
from .common import apply_patch, get_or_404
from .transaction_service import record_transaction

EXPENSE_MUTABLE_FIELDS = {"title", "category", "amount", "expense_date", "notes"}

NOT_FOUND_MESSAGE = "Expense not found"


def list_expenses() -> list[dict]:
    """Newest first."""
    rows = db.session.query(Expense).order_by(Expense.id.desc()).all()
    return [e.to_dict() for e in rows]


def create_expense(*, patch: dict, actor: str | None = None) -> dict:
    e = Expense()
    apply_patch(e, patch, EXPENSE_MUTABLE_FIELDS)

    db.session.add(e)
    db.session.commit()

    record_transaction(
        username=actor,
        action="Expense Added",
        description=f"Expense '{e.title}' ({e.category}) {e.amount:.2f} on {e.expense_date.isoformat()}",
    )
    return e.to_dict()


def update_expense(*, expense_id: int, patch: dict, actor: str | None = None) -> dict:
    e = get_or_404(Expense, expense_id, NOT_FOUND_MESSAGE)

    apply_patch(e, patch, EXPENSE_MUTABLE_FIELDS)
    db.session.commit()

    record_transaction(
        username=actor,
        action="Expense Updated",
        description=f"Expense '{e.title}' updated",
    )
    return e.to_dict()


def delete_expense(*, expense_id: int, actor: str | None = None) -> None:
    e = get_or_404(Expense, expense_id, NOT_FOUND_MESSAGE)
    title = e.title

    db.session.delete(e)
    db.session.commit()

    record_transaction(username=actor, action="Expense Deleted", description=f"Expense '{title}' deleted")
