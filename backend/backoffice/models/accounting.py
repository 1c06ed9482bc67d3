from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class Invoice(db.Model):
    """
    Customer invoice.

    items is an ordered list of {description, quantity, unitPrice, total}
    stored as JSON text. total_amount is whatever the client sent; it is
    never recomputed from the items (manual discounts and taxes are allowed).
    """
    __tablename__ = "invoices"
    __table_args__ = (
        db.Index("ix_invoices_status", "status"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(255), nullable=False)
    customer_email = db.Column(db.String(255), nullable=True)
    customer_phone = db.Column(db.String(64), nullable=True)
    total_amount = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(32), nullable=False, default="pending")
    items = db.Column(db.JSON, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "totalAmount": float(self.total_amount) if self.total_amount is not None else None,
            "status": self.status,
            "items": list(self.items or []),
            "createdAt": to_utc_z(self.created_at),
        }


class Expense(db.Model):
    __tablename__ = "expenses"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(120), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    expense_date = db.Column(db.Date, nullable=False)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "amount": float(self.amount) if self.amount is not None else None,
            "expenseDate": self.expense_date.isoformat() if self.expense_date else None,
            "notes": self.notes,
            "createdAt": to_utc_z(self.created_at),
        }
