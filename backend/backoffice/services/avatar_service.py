# Overview: Filesystem-backed avatar image store.

"""
Avatars are written under AVATAR_UPLOAD_DIR and served back by filename.

Upload input is a base64 data URI ("data:image/png;base64,...."). The stored
filename is avatar-<identifier>-<epoch ms>.<subtype>; retrieval only accepts
names that are already safe path components, so a request can never reach
outside the avatar directory.
"""

from __future__ import annotations

import base64
import binascii
import os
import re
import time

from flask import current_app
from werkzeug.utils import secure_filename

from ..errors import InternalError, NotFoundError, ValidationError

DATA_URI_RE = re.compile(r"^data:image/(?P<subtype>[A-Za-z0-9]+);base64,(?P<data>.+)$", re.DOTALL)

CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
}
DEFAULT_CONTENT_TYPE = "image/png"
CACHE_CONTROL = "public, max-age=31536000"

PUBLIC_PREFIX = "/api/avatars/"


def avatar_dir() -> str:
    return current_app.config["AVATAR_UPLOAD_DIR"]


def _decode_data_uri(data_uri) -> tuple[str, bytes]:
    if not isinstance(data_uri, str):
        raise ValidationError("Invalid image data")
    match = DATA_URI_RE.match(data_uri.strip())
    if not match:
        raise ValidationError("Invalid image data")
    try:
        payload = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid image data")
    if not payload:
        raise ValidationError("Invalid image data")
    return match.group("subtype").lower(), payload


def store_avatar(data_uri, identifier=None) -> dict:
    """
    Decode and persist an avatar image.

    Returns {"success": True, "path": <public url path>, "filename": <name>}.

    Raises:
        ValidationError: not a base64 image data URI
        InternalError: the file could not be written
    """
    subtype, payload = _decode_data_uri(data_uri)

    owner = secure_filename(str(identifier)) if identifier not in (None, "") else ""
    filename = f"avatar-{owner or 'anonymous'}-{int(time.time() * 1000)}.{subtype}"

    upload_dir = avatar_dir()
    try:
        os.makedirs(upload_dir, exist_ok=True)
        with open(os.path.join(upload_dir, filename), "wb") as fh:
            fh.write(payload)
    except OSError:
        current_app.logger.exception("Failed to write avatar %s", filename)
        raise InternalError("Failed to upload avatar")

    return {
        "success": True,
        "path": f"{PUBLIC_PREFIX}{filename}",
        "filename": filename,
    }


def content_type_for(filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def load_avatar(filename: str) -> tuple[bytes, str]:
    """
    Returns (image bytes, content type).

    Raises:
        NotFoundError: unknown or unsafe filename
    """
    if not filename or secure_filename(filename) != filename:
        raise NotFoundError("Avatar not found")

    path = os.path.join(avatar_dir(), filename)
    if not os.path.isfile(path):
        raise NotFoundError("Avatar not found")

    try:
        with open(path, "rb") as fh:
            data = fh.read()
    except OSError:
        current_app.logger.exception("Failed to read avatar %s", filename)
        raise InternalError("Failed to read avatar")

    return data, content_type_for(filename)
