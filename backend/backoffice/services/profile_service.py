# Overview: Flat JSON file store for per-user profile overrides (avatar, bio, username).

"""
Profiles live in a single JSON object keyed by email:

    {"ayse@store.com": {"avatar": "/api/avatars/...", "bio": "...",
                        "username": "...", "updatedAt": "2026-01-01T10:00:00Z"}}

A save replaces the whole profile entry of that email. Writes go to a
temporary file that is then renamed over the store, so readers never see a
half-written document. There is no locking between concurrent writers;
the last rename wins.
"""

from __future__ import annotations

import json
import os

from flask import current_app

from ..errors import InternalError, ValidationError
from ..time_utils import to_utc_z, utcnow

PROFILE_FIELDS = ("avatar", "bio", "username")


def profiles_path() -> str:
    return current_app.config["USER_PROFILES_FILE"]


def load_profiles() -> dict:
    path = profiles_path()
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        current_app.logger.exception("Failed to read profile store %s", path)
        raise InternalError("Failed to read user profiles")
    if not isinstance(data, dict):
        current_app.logger.error("Profile store %s does not contain a JSON object", path)
        raise InternalError("Failed to read user profiles")
    return data


def save_profiles(profiles: dict) -> None:
    path = profiles_path()
    tmp_path = f"{path}.tmp"
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(profiles, fh, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
    except OSError:
        current_app.logger.exception("Failed to write profile store %s", path)
        raise InternalError("Failed to save user profile")


def _require_email(email) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email required")
    return email.strip()


def get_profile(email) -> dict | None:
    return load_profiles().get(_require_email(email))


def save_profile(payload: dict) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    email = _require_email(payload.get("email"))

    profile = {}
    for key in PROFILE_FIELDS:
        value = payload.get(key)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{key} must be a string")
        profile[key] = value
    profile["updatedAt"] = to_utc_z(utcnow())

    profiles = load_profiles()
    profiles[email] = profile
    save_profiles(profiles)
    return profile
