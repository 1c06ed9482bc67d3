# Overview: Service-layer operations for user accounts.

"""
User management

- Email is unique across all accounts. The duplicate check runs before the
  insert; the unique constraint backs it up for concurrent writers.
- Passwords reach this module in plaintext under the password_hash key of a
  validated patch and are hashed here before anything is stored.
- Changing a password revokes the user's other sessions.
- Deleting a user removes their sessions; their audit entries and invoices
  are left untouched.
"""

from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..errors import ConflictError
from ..models import User, ROLE_STAFF
from . import session_service
from .auth_service import hash_password
from .common import apply_patch, commit_or_conflict, get_or_404
from .transaction_service import record_transaction

USER_MUTABLE_FIELDS = {"email", "password_hash", "name", "username", "bio", "role"}

EMAIL_TAKEN_MESSAGE = "Email is already in use"
NOT_FOUND_MESSAGE = "User not found"


def list_users() -> list[dict]:
    rows = db.session.query(User).order_by(User.id.asc()).all()
    return [u.to_dict() for u in rows]


def get_user_by_email(email: str) -> User | None:
    return db.session.query(User).filter(User.email == email).first()


def _email_taken(email: str, exclude_user_id: int | None = None) -> bool:
    query = db.session.query(User).filter(User.email == email)
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is not None


def create_user(*, patch: dict, actor: str | None = None) -> dict:
    """
    Create an account from a validated patch.

    Raises:
        ConflictError: email already registered
    """
    if _email_taken(patch["email"]):
        raise ConflictError(EMAIL_TAKEN_MESSAGE)

    values = dict(patch)
    values["password_hash"] = hash_password(values["password_hash"])
    if not values.get("role"):
        values["role"] = ROLE_STAFF

    user = User()
    apply_patch(user, values, USER_MUTABLE_FIELDS)

    db.session.add(user)
    commit_or_conflict(EMAIL_TAKEN_MESSAGE)

    record_transaction(
        username=actor,
        action="User Created",
        description=f"User {user.email} created with role {user.role}",
    )
    return user.to_dict()


def update_user(
    *,
    user_id: int,
    patch: dict,
    actor: str | None = None,
    keep_session_id: int | None = None,
) -> dict:
    """
    Merge a validated patch into the stored user.

    Raises:
        NotFoundError: no user with user_id
        ConflictError: new email belongs to a different user
    """
    user = get_or_404(User, user_id, NOT_FOUND_MESSAGE)

    if "email" in patch and patch["email"] != user.email:
        if _email_taken(patch["email"], exclude_user_id=user.id):
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

    values = dict(patch)
    password_changed = "password_hash" in values
    if password_changed:
        values["password_hash"] = hash_password(values["password_hash"])

    apply_patch(user, values, USER_MUTABLE_FIELDS)

    if password_changed:
        sessions = session_service.revoke_all_user_sessions(
            user.id, reason="Password changed", keep_session_id=keep_session_id
        )
        current_app.logger.info("Password changed for user %s, %d session(s) revoked", user.id, sessions)

    commit_or_conflict(EMAIL_TAKEN_MESSAGE)

    changed = sorted(k if k != "password_hash" else "password" for k in patch.keys())
    record_transaction(
        username=actor,
        action="User Updated",
        description=f"User {user.email} updated (fields: {', '.join(changed) or 'none'})",
    )
    return user.to_dict()


def delete_user(*, user_id: int, actor: str | None = None) -> None:
    user = get_or_404(User, user_id, NOT_FOUND_MESSAGE)
    email = user.email

    session_service.delete_user_sessions(user.id)
    db.session.delete(user)
    db.session.commit()

    current_app.logger.info("User %s (%s) deleted", user_id, email)
    record_transaction(username=actor, action="User Deleted", description=f"User {email} deleted")
