# Overview: Service-layer operations for invoices.

from __future__ import annotations

from ..extensions import db
from ..models import Invoice
from .common import apply_patch, get_or_404
from .transaction_service import record_transaction

INVOICE_MUTABLE_FIELDS = {
    "customer_name", "customer_email", "customer_phone", "total_amount", "status", "items",
}
DEFAULT_STATUS = "pending"

NOT_FOUND_MESSAGE = "Invoice not found"


def list_invoices(status: str | None = None) -> list[dict]:
    """All invoices by id; status filters on exact (case-sensitive) equality."""
    query = db.session.query(Invoice)
    if status:
        query = query.filter(Invoice.status == status)
    return [inv.to_dict() for inv in query.order_by(Invoice.id.asc()).all()]


def create_invoice(*, patch: dict, actor: str | None = None) -> dict:
    inv = Invoice()
    apply_patch(inv, patch, INVOICE_MUTABLE_FIELDS)
    if not inv.status:
        inv.status = DEFAULT_STATUS

    db.session.add(inv)
    db.session.commit()

    record_transaction(
        username=actor,
        action="Invoice Created",
        description=f"Invoice #{inv.id} for {inv.customer_name} ({inv.total_amount:.2f}, {inv.status})",
    )
    return inv.to_dict()


def update_invoice(*, invoice_id: int, patch: dict, actor: str | None = None) -> dict:
    inv = get_or_404(Invoice, invoice_id, NOT_FOUND_MESSAGE)

    previous_status = inv.status
    apply_patch(inv, patch, INVOICE_MUTABLE_FIELDS)
    db.session.commit()

    if inv.status != previous_status:
        description = f"Invoice #{inv.id} status changed from {previous_status} to {inv.status}"
    else:
        description = f"Invoice #{inv.id} for {inv.customer_name} updated"
    record_transaction(username=actor, action="Invoice Updated", description=description)
    return inv.to_dict()


def delete_invoice(*, invoice_id: int, actor: str | None = None) -> None:
    inv = get_or_404(Invoice, invoice_id, NOT_FOUND_MESSAGE)
    label = f"Invoice #{inv.id} for {inv.customer_name}"

    db.session.delete(inv)
    db.session.commit()

    record_transaction(username=actor, action="Invoice Deleted", description=f"{label} deleted")
