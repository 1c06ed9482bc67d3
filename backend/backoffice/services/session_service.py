# Overview: Service-layer operations for session; encapsulates business logic and database work.

"""
Session Token Management Service

Tokens are cryptographically secure, hashed in the database and time-limited.
Each request re-reads the user behind the token, so the role used for access
decisions always comes from the users table, never from the client.

- 32-byte random tokens, stored as SHA-256
- 24-hour absolute timeout (SESSION_ABSOLUTE_TIMEOUT)
- 2-hour idle timeout (SESSION_IDLE_TIMEOUT)
- Revocable on logout, password change and user deletion
"""

import secrets
import hashlib
from dataclasses import dataclass
from datetime import timedelta
from ..extensions import db
from ..models import SessionToken, User
from ..time_utils import utcnow


# Configuration constants
SESSION_ABSOLUTE_TIMEOUT = timedelta(hours=24)  # Maximum session length
SESSION_IDLE_TIMEOUT = timedelta(hours=2)        # Activity timeout


@dataclass
class SessionContext:
    """Session context returned by validate_session."""
    user: User
    session: SessionToken


def generate_token() -> str:
    """
    Generate cryptographically secure random token.

    Returns 64-character hex string (32 bytes of entropy).
    This is the plaintext token sent to client (never stored).
    """
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """
    Hash token for database storage using SHA-256.

    Tokens are already high-entropy, so a fast hash is sufficient.
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def create_session(
    user_id: int,
    user_agent: str | None = None,
    ip_address: str | None = None
) -> tuple[SessionToken, str]:
    """
    Create new session token for user.

    Returns (session_record, plaintext_token).
    Client receives plaintext_token, database stores only the hash.

    Raises ValueError if the user does not exist.
    """
    user = db.session.get(User, user_id)
    if not user:
        raise ValueError("User not found")

    plaintext_token = generate_token()
    now = utcnow()

    session = SessionToken(
        user_id=user_id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        last_used_at=now,
        expires_at=now + SESSION_ABSOLUTE_TIMEOUT,
        user_agent=(user_agent or "")[:255] or None,
        ip_address=ip_address,
        is_revoked=False
    )

    db.session.add(session)
    db.session.commit()

    return session, plaintext_token


def _revoke(session: SessionToken, reason: str) -> None:
    session.is_revoked = True
    session.revoked_at = utcnow()
    session.revoked_reason = reason


def validate_session(token: str) -> SessionContext | None:
    """
    Validate session token and return SessionContext if valid.

    Returns None if the token is unknown, expired, idle too long or revoked,
    or if its user no longer exists.

    Updates last_used_at on successful validation (activity tracking).
    """
    if not token:
        return None

    now = utcnow()

    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False
    ).first()

    if not session:
        return None

    # Check absolute timeout
    if session.expires_at < now:
        return None

    # Check idle timeout
    if now - session.last_used_at > SESSION_IDLE_TIMEOUT:
        _revoke(session, "Idle timeout")
        db.session.commit()
        return None

    user = session.user
    if not user:
        _revoke(session, "User removed")
        db.session.commit()
        return None

    session.last_used_at = now
    db.session.commit()

    return SessionContext(user=user, session=session)


def revoke_session(token: str, reason: str = "User logout") -> bool:
    """
    Revoke session token.

    Returns True if session was revoked, False if not found.
    """
    session = db.session.query(SessionToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False
    ).first()

    if not session:
        return False

    _revoke(session, reason)
    db.session.commit()
    return True


def revoke_all_user_sessions(
    user_id: int,
    reason: str = "Revoke all sessions",
    keep_session_id: int | None = None,
) -> int:
    """
    Revoke all active sessions for a user, optionally sparing one (the
    session that made the change).

    Returns count of sessions revoked. Caller commits.
    """
    query = db.session.query(SessionToken).filter_by(
        user_id=user_id,
        is_revoked=False
    )
    if keep_session_id is not None:
        query = query.filter(SessionToken.id != keep_session_id)
    sessions = query.all()

    for session in sessions:
        _revoke(session, reason)

    return len(sessions)


def delete_user_sessions(user_id: int) -> int:
    """Remove every session row of a user about to be deleted. Caller commits."""
    return db.session.query(SessionToken).filter_by(user_id=user_id).delete()


def cleanup_expired_sessions(older_than_days: int = 30) -> int:
    """
    Delete expired and revoked sessions older than the retention window.

    Returns count of sessions deleted.
    """
    now = utcnow()
    cutoff = now - timedelta(days=older_than_days)

    deleted = db.session.query(SessionToken).filter(
        db.or_(
            SessionToken.expires_at < now,
            SessionToken.is_revoked.is_(True)
        ),
        SessionToken.created_at < cutoff
    ).delete(synchronize_session=False)

    db.session.commit()
    return deleted
