# Overview: Flask API routes for the audit trail ("transactions" history view).

from flask import Blueprint, jsonify

from ..access import ADMIN_ROLES, SUPERVISOR_PLUS_ROLES
from ..decorators import require_auth, require_role
from ..services import transaction_service
from ..validation import read_json_object

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transactions")


@transactions_bp.get("")
@require_auth
@require_role(*SUPERVISOR_PLUS_ROLES)
def list_transactions():
    """Newest entry first."""
    return jsonify(transaction_service.list_transactions())


@transactions_bp.post("/add")
@require_auth
def add_transaction_route():
    """
    Client-reported audit entry.

    Body: {"action": ..., "description": ..., "username": optional}
    A missing username is stored as the configured placeholder.
    """
    payload = read_json_object()

    entry = transaction_service.add_transaction(payload)
    if entry is None:
        return jsonify({"success": False, "error": "Failed to add transaction"}), 500

    return jsonify({"success": True, "transaction": entry.to_dict()}), 201


@transactions_bp.delete("/clear")
@require_auth
@require_role(*ADMIN_ROLES)
def clear_transactions_route():
    """Remove the whole audit trail. Irreversible."""
    deleted = transaction_service.clear_transactions()
    return jsonify({"success": True, "deleted": deleted}), 200
