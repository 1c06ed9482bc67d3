# Overview: Flask API routes for invoices; parses input and returns JSON responses.

from flask import Blueprint, jsonify, request

from ..decorators import actor_name, require_auth
from ..models import Invoice
from ..services import invoices_service
from ..services.common import parse_id
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_invoice,
    read_json_object,
    validate_payload,
)

INVOICE_POLICY = ModelValidationPolicy(
    writable_fields={
        "customer_name", "customer_email", "customer_phone", "total_amount", "status", "items",
    },
    required_on_create={"customer_name", "total_amount", "items"},
    aliases={
        "customerName": "customer_name",
        "customerEmail": "customer_email",
        "customerPhone": "customer_phone",
        "totalAmount": "total_amount",
    },
)

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.get("")
@require_auth
def list_invoices():
    """
    List invoices.

    Query params:
    - status: str (optional) - exact match, e.g. "paid"
    """
    status = request.args.get("status")
    return jsonify(invoices_service.list_invoices(status=status))


@invoices_bp.post("")
@require_auth
def create_invoice_route():
    payload = read_json_object()

    patch = validate_payload(model=Invoice, payload=payload, policy=INVOICE_POLICY, partial=False)
    enforce_rules_invoice(patch)

    created = invoices_service.create_invoice(patch=patch, actor=actor_name())
    return jsonify({"success": True, "invoice": created}), 201


@invoices_bp.put("")
@require_auth
def update_invoice_route():
    payload = read_json_object()
    invoice_id = parse_id(payload.get("id"), missing_message="Invoice id is required")

    patch = validate_payload(model=Invoice, payload=payload, policy=INVOICE_POLICY, partial=True)
    enforce_rules_invoice(patch)

    updated = invoices_service.update_invoice(invoice_id=invoice_id, patch=patch, actor=actor_name())
    return jsonify({"success": True, "invoice": updated}), 200


@invoices_bp.delete("")
@require_auth
def delete_invoice_route():
    invoice_id = parse_id(request.args.get("id"), missing_message="Invoice id is required")

    invoices_service.delete_invoice(invoice_id=invoice_id, actor=actor_name())
    return jsonify({"success": True, "message": "Invoice deleted"}), 200
