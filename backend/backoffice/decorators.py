# Overview: Request decorators for API routes (session authentication and role checks).

from functools import wraps
from flask import request, g

from .access import role_of
from .errors import AuthError, ForbiddenError
from .services import session_service


def bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1].strip() or None


def resolve_session():
    """SessionContext for the request's bearer token, or None."""
    token = bearer_token()
    if not token:
        return None
    return session_service.validate_session(token)


def require_auth(f):
    """
    Require a valid session token.

    Sets the following Flask g attributes:
    - g.current_user: the User behind the token, loaded fresh from the database
    - g.session_context: the full SessionContext object

    Raises AuthError (401) if the Authorization header is missing or the
    token is invalid, expired or revoked.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not bearer_token():
            raise AuthError("Authentication required")

        context = resolve_session()
        if not context:
            raise AuthError("Invalid or expired token")

        g.current_user = context.user
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def require_role(*roles: str):
    """
    Require the session user to hold one of the given roles.

    Must be stacked under @require_auth.
    """
    allowed = frozenset(roles)

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not hasattr(g, "current_user"):
                raise AuthError("Authentication required")

            if role_of(g.current_user) not in allowed:
                raise ForbiddenError(f"Requires role: {', '.join(sorted(allowed))}")

            return f(*args, **kwargs)

        return decorated_function
    return decorator


def actor_name() -> str | None:
    """Display name used to attribute audit entries to the session user."""
    user = getattr(g, "current_user", None)
    if user is None:
        return None
    return user.name or user.username or user.email
