# Overview: Flask API routes for avatar upload and download.

from flask import Blueprint, Response, g, jsonify

from ..access import ADMIN_ROLES, role_of
from ..decorators import require_auth
from ..services import avatar_service
from ..validation import read_json_object

avatars_bp = Blueprint("avatars", __name__, url_prefix="/api")


@avatars_bp.post("/upload-avatar")
@require_auth
def upload_avatar_route():
    """
    Body: {"avatar": "data:image/png;base64,...", "userId": optional}

    userId only names the file; it defaults to the session user's id and is
    ignored for non-admins.
    """
    payload = read_json_object()
    identifier = g.current_user.id
    if role_of(g.current_user) in ADMIN_ROLES:
        identifier = payload.get("userId", identifier)

    result = avatar_service.store_avatar(payload.get("avatar"), identifier)
    return jsonify(result), 201


@avatars_bp.get("/avatars/<filename>")
def get_avatar_route(filename: str):
    """Public so <img> tags can load it without a token."""
    data, content_type = avatar_service.load_avatar(filename)

    response = Response(data, mimetype=content_type)
    response.headers["Cache-Control"] = avatar_service.CACHE_CONTROL
    return response
