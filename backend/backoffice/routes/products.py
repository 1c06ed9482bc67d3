# Overview: Flask API routes for products; parses input and returns JSON responses.

# backend/backoffice/routes/products.py
"""
Product catalog routes.

All routes require an authenticated session; any role may manage products.
"""
from flask import Blueprint, current_app, jsonify, request

from ..decorators import actor_name, require_auth
from ..models import Product
from ..services import products_service
from ..services.common import parse_id
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_product,
    read_json_object,
    validate_payload,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "price", "stock", "category", "size", "barcode"},
    required_on_create={"name", "description", "price", "stock"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
def list_products():
    """
    List all products.

    Query params:
    - barcode: str (optional) - exact barcode match (scanner lookup)
    """
    barcode = request.args.get("barcode")
    return jsonify(products_service.list_products(barcode=barcode))


@products_bp.get("/low-stock")
@require_auth
def low_stock_products():
    """
    Products whose stock is at or below the threshold.

    Query params:
    - threshold: int (optional) - defaults to LOW_STOCK_THRESHOLD
    """
    threshold = request.args.get("threshold", type=int)
    if threshold is None:
        threshold = current_app.config["LOW_STOCK_THRESHOLD"]
    return jsonify(products_service.list_low_stock_products(threshold))


@products_bp.post("")
@require_auth
def create_product_route():
    payload = read_json_object()

    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    enforce_rules_product(patch)

    created = products_service.create_product(patch=patch, actor=actor_name())
    return jsonify({"success": True, "product": created}), 201


@products_bp.put("")
@require_auth
def update_product_route():
    """Field-level merge: omitted fields keep their stored value."""
    payload = read_json_object()
    product_id = parse_id(payload.get("id"), missing_message="Product id is required")

    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
    enforce_rules_product(patch)

    updated = products_service.update_product(product_id=product_id, patch=patch, actor=actor_name())
    return jsonify({"success": True, "product": updated}), 200


@products_bp.delete("")
@require_auth
def delete_product_route():
    product_id = parse_id(request.args.get("id"), missing_message="Product id is required")

    products_service.delete_product(product_id=product_id, actor=actor_name())
    return jsonify({"success": True, "message": "Product deleted"}), 200
