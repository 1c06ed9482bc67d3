# Overview: Flask API routes for product categories.

from flask import Blueprint, jsonify, request

from ..decorators import actor_name, require_auth
from ..models import Category
from ..services import categories_service
from ..services.common import parse_id
from ..validation import ModelValidationPolicy, read_json_object, validate_payload

CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"name"},
    required_on_create={"name"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
@require_auth
def list_categories():
    return jsonify(categories_service.list_categories())


@categories_bp.post("")
@require_auth
def create_category_route():
    payload = read_json_object()

    patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=False)

    created = categories_service.create_category(patch=patch, actor=actor_name())
    return jsonify({"success": True, "category": created}), 201


@categories_bp.delete("")
@require_auth
def delete_category_route():
    """Category id comes from ?id= or from a JSON body {"id": ...}."""
    raw_id = request.args.get("id")
    if raw_id is None:
        raw_id = read_json_object().get("id")
    category_id = parse_id(raw_id, missing_message="Category id is required")

    categories_service.delete_category(category_id=category_id, actor=actor_name())
    return jsonify({"success": True, "message": "Category deleted"}), 200
