# Overview: Flask API routes for user accounts; parses input and returns JSON responses.

# backend/backoffice/routes/users.py
"""
User management routes.

- Listing, creating and deleting users is admin only.
- PUT is open to admins for any account and to every user for their own
  account; only admins may change a role.
- Responses never include the password hash.
"""
from flask import Blueprint, g, jsonify

from ..access import ADMIN_ROLES, role_of
from ..decorators import actor_name, require_auth, require_role
from ..errors import ForbiddenError
from ..models import User
from ..services import users_service
from ..services.common import parse_id
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_user,
    read_json_object,
    validate_payload,
)

USER_POLICY = ModelValidationPolicy(
    writable_fields={"email", "password_hash", "name", "username", "bio", "role"},
    required_on_create={"email", "password_hash", "name"},
    aliases={"password": "password_hash"},
    # avatar lives in the profile store, clients echo it back with the user
    ignored_fields={"id", "createdAt", "avatar"},
    verbatim_fields={"password_hash"},
)

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("")
@require_auth
@require_role(*ADMIN_ROLES)
def list_users():
    return jsonify(users_service.list_users())


def _create_user_from_request():
    payload = read_json_object()

    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=False)
    enforce_rules_user(patch)

    created = users_service.create_user(patch=patch, actor=actor_name())
    return jsonify({"success": True, "user": created}), 201


@users_bp.post("")
@require_auth
@require_role(*ADMIN_ROLES)
def create_user_route():
    return _create_user_from_request()


@users_bp.post("/create")
@require_auth
@require_role(*ADMIN_ROLES)
def create_user_alias_route():
    return _create_user_from_request()


@users_bp.put("")
@require_auth
def update_user_route():
    payload = read_json_object()
    user_id = parse_id(payload.get("id"), missing_message="User id is required")

    patch = validate_payload(model=User, payload=payload, policy=USER_POLICY, partial=True)
    enforce_rules_user(patch)

    is_admin = role_of(g.current_user) in ADMIN_ROLES
    if not is_admin:
        if user_id != g.current_user.id:
            raise ForbiddenError("You can only update your own account")
        if "role" in patch and patch["role"] != role_of(g.current_user):
            raise ForbiddenError("Only administrators can change roles")

    updated = users_service.update_user(
        user_id=user_id,
        patch=patch,
        actor=actor_name(),
        keep_session_id=g.session_context.session.id,
    )
    return jsonify({"success": True, "user": updated}), 200


@users_bp.delete("/<user_id>")
@require_auth
@require_role(*ADMIN_ROLES)
def delete_user_route(user_id: str):
    user_id = parse_id(user_id, missing_message="User id is required")

    users_service.delete_user(user_id=user_id, actor=actor_name())
    return jsonify({"success": True, "message": "User deleted"}), 200
