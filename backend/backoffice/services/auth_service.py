# Overview: Service-layer operations for auth; password hashing and credential checks.

"""
Authentication Service

Passwords are stored as bcrypt hashes. The cost factor comes from
BCRYPT_LOG_ROUNDS so tests can run with the minimum cost.

Login identifies the account by email and returns the User on success.
Session tokens are managed separately (see session_service.py).
"""

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User


def hash_password(password: str) -> str:
    """Hash password using bcrypt with the configured cost factor."""
    rounds = current_app.config.get("BCRYPT_LOG_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() compares in constant time. A malformed stored hash
    counts as a mismatch.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def authenticate(email: str, password: str) -> User | None:
    """
    Authenticate user with email and password.

    Returns User if credentials are valid, None otherwise.
    """
    if not email or not password:
        return None

    user = db.session.query(User).filter(User.email == email.strip()).first()
    if not user:
        return None

    if verify_password(password, user.password_hash):
        return user

    return None
