from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from flask import request
from sqlalchemy import JSON, Boolean, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import ValidationError
from .models import ROLES
from .time_utils import parse_iso_date

# Maximum price/amount: 9,999,999.99
# This prevents nonsensical values from reaching reports
MAX_AMOUNT = 9_999_999.99

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: column keys clients are allowed to set (security boundary)
    - required_on_create: column keys required for POST
    - aliases: wire name (camelCase JSON key) -> column key
    - ignored_fields: wire keys silently dropped (ids and server timestamps
      echoed back by clients on PUT)
    - verbatim_fields: string column keys stored exactly as sent (no
      whitespace trimming), e.g. passwords
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    aliases: dict[str, str] = field(default_factory=dict)
    ignored_fields: set[str] = field(default_factory=lambda: {"id", "createdAt"})
    verbatim_fields: set[str] = field(default_factory=set)

    def wire_name(self, key: str) -> str:
        for wire, col in self.aliases.items():
            if col == key:
                return wire
        return key


def read_json_object() -> dict:
    """Request body as a JSON object; an absent body reads as {}."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _coerce_value(col, value: Any, name: str, strip: bool = True):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # String input - must be plain digits (with optional leading minus)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{name} must be an integer")
            # Reject scientific notation (e.g., "1e15", "1E10")
            if 'e' in stripped.lower():
                raise ValidationError(f"{name} must be a plain integer (scientific notation not allowed)")
            # Reject decimal points (e.g., "12.5")
            if '.' in stripped:
                raise ValidationError(f"{name} must be an integer (no decimals)")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{name} must be an integer")
        # Reject floats explicitly
        if isinstance(value, float):
            raise ValidationError(f"{name} must be an integer, not a decimal")
        # Other types
        raise ValidationError(f"{name} must be an integer")

    # Floats - money columns arrive as JSON numbers or numeric strings
    if isinstance(coltype, Float):
        if isinstance(value, bool):
            raise ValidationError(f"{name} must be a number")
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                raise ValidationError(f"{name} must be a number")
        else:
            raise ValidationError(f"{name} must be a number")
        if math.isnan(number) or math.isinf(number):
            raise ValidationError(f"{name} must be a finite number")
        return number

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        # fallback: truthiness
        return bool(value)

    # Calendar dates ("YYYY-MM-DD")
    if isinstance(coltype, Date):
        if isinstance(value, date) and not isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                d = parse_iso_date(value)
            except ValueError:
                raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")
            if d is None:
                raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")
            return d
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")

    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        raise ValidationError(f"{name} is assigned by the server")

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{name} must be a string")
        text = str(value)
        return text.strip() if strip else text

    # JSON columns are shaped by the per-model rules
    if isinstance(coltype, JSON):
        return value

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by column name.

    partial=False: create semantics (enforce required_on_create)
    partial=True: merge semantics for PUT. A key that is missing or null, or a
    blank string on a required column, is left out of the patch so the stored
    value is kept. A blank string on an optional column clears it.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    cols = _columns_by_key(model)

    incoming: dict[str, Any] = {}
    for wire_key, raw in payload.items():
        if wire_key in policy.ignored_fields:
            continue
        key = policy.aliases.get(wire_key, wire_key)
        # Reject unknown / non-writable fields
        if key not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {wire_key}")
        if key not in cols:
            raise ValidationError(f"Unknown field: {wire_key}")
        incoming[key] = raw

    if not partial:
        missing = sorted(
            policy.wire_name(k) for k in policy.required_on_create if _is_blank(incoming.get(k))
        )
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    patch: dict = {}

    for key, raw in incoming.items():
        col = cols[key]
        name = policy.wire_name(key)

        # NULL / blank handling
        if _is_blank(raw):
            if partial and (raw is None or not col.nullable):
                continue
            if not col.nullable:
                # columns with a default (invoice status, user role) fall back to it
                if col.default is not None:
                    continue
                raise ValidationError(f"{name} cannot be blank")
            patch[key] = None
            continue

        val = _coerce_value(col, raw, name, strip=key not in policy.verbatim_fields)

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{name} exceeds max length {col.type.length}")

        patch[key] = val

    return patch


def _check_amount(patch: dict, key: str, name: str) -> None:
    if key in patch and patch[key] is not None:
        if patch[key] < 0:
            raise ValidationError(f"{name} must be >= 0")
        if patch[key] > MAX_AMOUNT:
            raise ValidationError(f"{name} cannot exceed {MAX_AMOUNT:,.2f}")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    _check_amount(patch, "price", "price")
    if "stock" in patch and patch["stock"] is not None and patch["stock"] < 0:
        raise ValidationError("stock must be >= 0")


def enforce_rules_expense(patch: dict) -> None:
    _check_amount(patch, "amount", "amount")


def _coerce_item_number(item: dict, key: str, index: int) -> float:
    value = item.get(key)
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"items[{index}].{key} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"items[{index}].{key} must be a number")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"items[{index}].{key} must be a finite number")
    return number


def enforce_rules_invoice(patch: dict) -> None:
    """
    Normalizes invoice line items in place.

    totalAmount is deliberately not compared with the sum of the line totals.
    """
    if "items" in patch and patch["items"] is not None:
        items = patch["items"]
        if not isinstance(items, list):
            raise ValidationError("items must be a list")

        normalized = []
        for index, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValidationError(f"items[{index}] must be an object")
            description = item.get("description")
            if description is None:
                description = ""
            if not isinstance(description, str):
                raise ValidationError(f"items[{index}].description must be a string")
            normalized.append({
                "description": description.strip(),
                "quantity": _coerce_item_number(item, "quantity", index),
                "unitPrice": _coerce_item_number(item, "unitPrice", index),
                "total": _coerce_item_number(item, "total", index),
            })
        patch["items"] = normalized

    _check_amount(patch, "total_amount", "totalAmount")


def enforce_rules_user(patch: dict) -> None:
    email = patch.get("email")
    if email is not None and not EMAIL_RE.match(email):
        raise ValidationError("email must be a valid email address")

    role = patch.get("role")
    if role is not None and role not in ROLES:
        raise ValidationError(f"role must be one of: {', '.join(ROLES)}")

    # password arrives under the password_hash key (see USER_POLICY aliases)
    password = patch.get("password_hash")
    if password is not None:
        check_password(password)


def check_password(password: str) -> None:
    """Length rules for a plain-text password before it is hashed."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    # bcrypt only accepts the first 72 bytes
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
