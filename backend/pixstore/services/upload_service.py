# Overview: Service-layer operations for proof-of-payment uploads.

"""
Proof-of-payment file storage.

Files land in UPLOAD_FOLDER under a random name (the client's filename is
only kept in the activity log). Accepted: JPEG, PNG and PDF, checked on
both extension and declared mimetype. The size cap is MAX_CONTENT_LENGTH,
enforced by werkzeug before the route runs.
"""

from __future__ import annotations

import os
import uuid

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".pdf"}
ALLOWED_MIMETYPES = {"image/jpeg", "image/jpg", "image/png", "application/pdf"}
PUBLIC_PREFIX = "/uploads"


class UploadError(Exception):
    """Rejected upload (400-level)."""
    pass


def upload_folder() -> str:
    """Absolute upload directory; relative config values resolve under the instance path."""
    folder = current_app.config.get("UPLOAD_FOLDER", "uploads")
    if not os.path.isabs(folder):
        folder = os.path.join(current_app.instance_path, folder)
    return folder


def _extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lower()


def validate_upload(file: FileStorage | None) -> str:
    """Returns the normalized extension, or raises UploadError."""
    if file is None or not file.filename:
        raise UploadError("No file uploaded")

    ext = _extension(secure_filename(file.filename) or file.filename)
    mimetype = (file.mimetype or "").lower()
    if ext not in ALLOWED_EXTENSIONS or mimetype not in ALLOWED_MIMETYPES:
        raise UploadError("Invalid file type. Only JPEG, PNG, and PDF files are allowed.")
    return ext


def save_proof(file: FileStorage | None) -> tuple[str, str]:
    """
    Validate and store an uploaded proof.

    Returns (public_url, stored_filename).
    """
    ext = validate_upload(file)
    folder = upload_folder()
    os.makedirs(folder, exist_ok=True)

    stored_name = f"{uuid.uuid4().hex}{ext}"
    file.save(os.path.join(folder, stored_name))
    return f"{PUBLIC_PREFIX}/{stored_name}", stored_name


def discard_proof(stored_name: str) -> None:
    """Remove a stored proof that never got attached to its payment."""
    try:
        os.remove(os.path.join(upload_folder(), stored_name))
    except FileNotFoundError:
        pass
