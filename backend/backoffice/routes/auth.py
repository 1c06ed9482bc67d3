# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/backoffice/routes/auth.py
"""
Authentication routes

- Login checks the bcrypt hash and issues a bearer token.
- The token must be sent as "Authorization: Bearer <token>" on every other
  API call; the user's role is looked up from it on each request.
- /access answers the view guard question for the front-end router.
"""

from flask import Blueprint, g, jsonify, request

from ..access import evaluate_route_access
from ..decorators import bearer_token, require_auth, resolve_session
from ..errors import AuthError, ValidationError
from ..services import auth_service, session_service
from ..validation import read_json_object

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Body: {"email": ..., "password": ...}
    Returns the user (without password) and the session token.
    """
    data = read_json_object()
    email = data.get("email")
    password = data.get("password")

    if not email or not password:
        raise ValidationError("email and password required")
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("email and password must be strings")

    user = auth_service.authenticate(email, password)
    if not user:
        raise AuthError("Invalid email or password")

    session, token = session_service.create_session(
        user_id=user.id,
        user_agent=request.headers.get("User-Agent"),
        ip_address=request.remote_addr,
    )

    return jsonify({
        "success": True,
        "user": user.to_dict(),
        "token": token,
        "session": session.to_dict(),
    }), 200


@auth_bp.post("/logout")
def logout_route():
    """Revoke the session token carried by the request."""
    token = bearer_token()
    if not token:
        raise AuthError("Authorization header required")

    if not session_service.revoke_session(token, reason="User logout"):
        raise AuthError("Invalid or expired token")

    return jsonify({"success": True, "message": "Logout successful"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    return jsonify({"success": True, "user": g.current_user.to_dict()}), 200


@auth_bp.get("/access")
def access_route():
    """
    Route guard for the front-end.

    Query params:
    - path: str - the view about to be rendered, e.g. "/dashboard"

    Works with or without a token: no valid session means "login".
    """
    path = request.args.get("path", "/")
    context = resolve_session()
    user = context.user if context else None
    return jsonify(evaluate_route_access(path, user).to_dict()), 200
