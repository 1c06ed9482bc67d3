# Overview: Flask API routes for user profile overrides kept in the JSON profile store.

from flask import Blueprint, g, jsonify, request

from ..access import ADMIN_ROLES, role_of
from ..decorators import require_auth
from ..errors import ForbiddenError
from ..services import profile_service
from ..validation import read_json_object

profiles_bp = Blueprint("profiles", __name__, url_prefix="/api/user-profile")


@profiles_bp.get("")
@require_auth
def get_profile_route():
    """
    Query params:
    - email: str (required)

    Returns the stored profile, or null when the user never saved one.
    """
    return jsonify(profile_service.get_profile(request.args.get("email")))


@profiles_bp.post("")
@require_auth
def save_profile_route():
    payload = read_json_object()

    if role_of(g.current_user) not in ADMIN_ROLES and payload.get("email") not in (None, g.current_user.email):
        raise ForbiddenError("You can only update your own profile")

    profile = profile_service.save_profile(payload)
    return jsonify({"success": True, "profile": profile}), 200
