# Overview: Service-layer operations for the audit trail (the "transactions" history).

"""
Audit trail invariants

- Append-only: rows are inserted, never updated. clear_transactions() is the
  only delete and removes everything.
- Best effort: record_transaction() commits on its own, after the business
  mutation it describes has been committed. A failure is rolled back and
  logged; it never reaches the caller. If the process dies between the two
  commits the entry is lost (at-most-once).
- timestamp is rendered server-side at write time with AUDIT_TIMESTAMP_FORMAT.
"""

from __future__ import annotations

from flask import current_app
from ..extensions import db
from ..errors import ValidationError
from ..models import Transaction
from ..time_utils import audit_timestamp


def _default_username() -> str:
    return current_app.config.get("AUDIT_DEFAULT_USERNAME", "System User")


def record_transaction(
    *,
    action: str,
    description: str,
    username: str | None = None,
) -> Transaction | None:
    """
    Append one audit entry. Returns the stored row, or None if the write failed.
    """
    try:
        entry = Transaction(
            username=(username or "").strip() or _default_username(),
            action=action,
            description=description,
            timestamp=audit_timestamp(current_app.config["AUDIT_TIMESTAMP_FORMAT"]),
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    except Exception:
        # never let the audit trail fail the operation it describes
        db.session.rollback()
        current_app.logger.exception("Failed to record audit entry action=%r", action)
        return None


def add_transaction(payload: dict) -> Transaction | None:
    """
    Client-submitted audit entry. action and description are required;
    username falls back to the configured placeholder.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    action = payload.get("action")
    description = payload.get("description")
    if not isinstance(action, str) or not action.strip():
        raise ValidationError("action is required")
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("description is required")

    username = payload.get("username")
    if username is not None and not isinstance(username, str):
        raise ValidationError("username must be a string")

    return record_transaction(
        action=action.strip(),
        description=description.strip(),
        username=username,
    )


def list_transactions() -> list[dict]:
    rows = db.session.query(Transaction).order_by(Transaction.id.desc()).all()
    return [r.to_dict() for r in rows]


def clear_transactions() -> int:
    """Remove every audit entry. Irreversible; confirmation is the caller's job."""
    deleted = db.session.query(Transaction).delete(synchronize_session=False)
    db.session.commit()
    current_app.logger.info("Audit trail cleared (%d entries removed)", deleted)
    return deleted
