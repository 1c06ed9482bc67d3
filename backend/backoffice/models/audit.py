from __future__ import annotations

from ..extensions import db


class Transaction(db.Model):
    """
    Audit trail entry ("transaction" in the UI's history view).

    IMMUTABLE: rows are only ever inserted. The one destructive operation is
    the bulk clear, which removes every row.

    timestamp is a preformatted wall-clock string written at insert time.
    """
    __tablename__ = "transactions"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(255), nullable=False)
    action = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    timestamp = db.Column(db.String(32), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "action": self.action,
            "description": self.description,
            "timestamp": self.timestamp,
        }
