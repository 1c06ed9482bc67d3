# Overview: Helpers shared by the resource services (id parsing, row lookup, conflict-safe commits).

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError

ModelT = TypeVar("ModelT")


def parse_id(raw: Any, *, missing_message: str = "id is required") -> int:
    """Accepts ints and digit strings; anything else is a ValidationError."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError(missing_message)
    if isinstance(raw, bool):
        raise ValidationError("id must be an integer")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValidationError("id must be an integer")


def get_or_404(model: type[ModelT], obj_id: int, message: str) -> ModelT:
    obj = db.session.get(model, obj_id)
    if obj is None:
        raise NotFoundError(message)
    return obj


def apply_patch(obj, patch: dict, mutable_fields: set[str]) -> None:
    for k, v in patch.items():
        if k not in mutable_fields:
            continue
        setattr(obj, k, v)


def commit_or_conflict(message: str) -> None:
    """
    Commit the current unit of work, turning a store-level uniqueness
    violation into ConflictError.
    """
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(message)
