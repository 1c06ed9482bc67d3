# Overview: Error taxonomy shared by services and routes; each error maps to one HTTP status.

from __future__ import annotations


class ApiError(Exception):
    """Base class for errors that are reported to the client as JSON."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message}


class ValidationError(ApiError):
    """400-level input problem."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(ApiError):
    """Uniqueness violation (duplicate email, duplicate category name)."""

    status_code = 400
    default_message = "Resource already exists"


class AuthError(ApiError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "Permission denied"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class MethodNotAllowedError(ApiError):
    status_code = 405
    default_message = "Method not allowed"


class InternalError(ApiError):
    """Store or filesystem failure."""

    status_code = 500
