# Overview: Role gate for back-office views and the role sets shared with the API decorators.

"""
Access policy

    /login                    always reachable
    no session                -> /login
    ADMIN_ONLY_PATHS          admin only, others -> DEFAULT_PATH
    SUPERVISOR_PLUS_PATHS     admin and supervisor, staff -> DEFAULT_PATH
    anything else             any signed-in user

The user passed in must come from the server-side session (see
decorators.py); a role claimed by the client is never consulted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .models import ROLE_ADMIN, ROLE_STAFF, ROLE_SUPERVISOR

LOGIN_PATH = "/login"
DEFAULT_PATH = "/products"

ADMIN_ONLY_PATHS = frozenset({"/users"})
SUPERVISOR_PLUS_PATHS = frozenset({"/dashboard", "/accounting", "/history"})

ADMIN_ROLES = frozenset({ROLE_ADMIN})
SUPERVISOR_PLUS_ROLES = frozenset({ROLE_ADMIN, ROLE_SUPERVISOR})


class AccessDecision(str, Enum):
    ALLOW = "allow"
    LOGIN = "login"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class AccessResult:
    decision: AccessDecision
    redirect_to: str | None = None

    def to_dict(self) -> dict:
        return {"decision": self.decision.value, "redirectTo": self.redirect_to}


def role_of(user) -> str:
    """Users without a stored role are treated as staff."""
    return getattr(user, "role", None) or ROLE_STAFF


def _normalize(path: str) -> str:
    path = (path or "/").split("?", 1)[0]
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


def evaluate_route_access(path: str, user) -> AccessResult:
    path = _normalize(path)

    if path == LOGIN_PATH:
        return AccessResult(AccessDecision.ALLOW)

    if user is None:
        return AccessResult(AccessDecision.LOGIN, LOGIN_PATH)

    role = role_of(user)

    if path in ADMIN_ONLY_PATHS and role not in ADMIN_ROLES:
        return AccessResult(AccessDecision.REDIRECT, DEFAULT_PATH)

    if path in SUPERVISOR_PLUS_PATHS and role not in SUPERVISOR_PLUS_ROLES:
        return AccessResult(AccessDecision.REDIRECT, DEFAULT_PATH)

    return AccessResult(AccessDecision.ALLOW)
