# Overview: Flask API routes for expenses (accounting); supervisor and admin only.

from flask import Blueprint, jsonify, request

from ..access import SUPERVISOR_PLUS_ROLES
from ..decorators import actor_name, require_auth, require_role
from ..models import Expense
from ..services import expenses_service
from ..services.common import parse_id
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_expense,
    read_json_object,
    validate_payload,
)

EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields={"title", "category", "amount", "expense_date", "notes"},
    required_on_create={"title", "category", "amount", "expense_date"},
    aliases={"expenseDate": "expense_date"},
)

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


@expenses_bp.get("")
@require_auth
@require_role(*SUPERVISOR_PLUS_ROLES)
def list_expenses():
    return jsonify(expenses_service.list_expenses())


@expenses_bp.post("")
@require_auth
@require_role(*SUPERVISOR_PLUS_ROLES)
def create_expense_route():
    payload = read_json_object()

    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=False)
    enforce_rules_expense(patch)

    created = expenses_service.create_expense(patch=patch, actor=actor_name())
    return jsonify({"success": True, "expense": created}), 201


@expenses_bp.put("")
@require_auth
@require_role(*SUPERVISOR_PLUS_ROLES)
def update_expense_route():
    payload = read_json_object()
    expense_id = parse_id(payload.get("id"), missing_message="Expense id is required")

    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=True)
    enforce_rules_expense(patch)

    updated = expenses_service.update_expense(expense_id=expense_id, patch=patch, actor=actor_name())
    return jsonify({"success": True, "expense": updated}), 200


@expenses_bp.delete("")
@require_auth
@require_role(*SUPERVISOR_PLUS_ROLES)
def delete_expense_route():
    expense_id = parse_id(request.args.get("id"), missing_message="Expense id is required")

    expenses_service.delete_expense(expense_id=expense_id, actor=actor_name())
    return jsonify({"success": True, "message": "Expense deleted"}), 200
