from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

ROLE_ADMIN = "admin"
ROLE_SUPERVISOR = "supervisor"
ROLE_STAFF = "staff"
ROLES = (ROLE_ADMIN, ROLE_SUPERVISOR, ROLE_STAFF)


class User(db.Model):
    """
    Back-office user account.

    Email is globally unique and is the login identifier. The role decides
    which views and endpoints the account can reach (see access.py).

    Passwords are stored as bcrypt hashes; the serialized form never
    includes the hash.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_users_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    username = db.Column(db.String(64), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    role = db.Column(db.String(32), nullable=False, default=ROLE_STAFF)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "username": self.username,
            "bio": self.bio,
            "role": self.role or ROLE_STAFF,
            "createdAt": to_utc_z(self.created_at),
        }


class SessionToken(db.Model):
    """
    Server-side session store.

    Only the SHA-256 of the bearer token is persisted; the plaintext token is
    handed to the client once at login. The role is never cached here so a
    role change applies on the next request.
    """
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_user_revoked", "user_id", "is_revoked"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    token_hash = db.Column(db.String(64), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)
    revoked_reason = db.Column(db.String(255), nullable=True)

    user_agent = db.Column(db.String(255), nullable=True)
    ip_address = db.Column(db.String(64), nullable=True)

    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "createdAt": to_utc_z(self.created_at),
            "lastUsedAt": to_utc_z(self.last_used_at),
            "expiresAt": to_utc_z(self.expires_at),
            "isRevoked": self.is_revoked,
        }
