"""Menu image upload handling.

Images are written to ``<upload_dir>/menu`` under a generated name and
referenced from MenuItem records as ``/uploads/menu/<name>``.
"""

import logging
import os
import re
import uuid
from pathlib import Path
from typing import Set

from fastapi import UploadFile

from cafe.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS: Set[str] = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
ALLOWED_IMAGE_MIMETYPES: Set[str] = {"image/jpeg", "image/png", "image/gif", "image/webp"}

MENU_UPLOAD_SUBDIR = "menu"
UPLOAD_URL_PREFIX = "/uploads"

READ_CHUNK_SIZE = 64 * 1024


def generate_secure_filename(original_filename: str, prefix: str = "") -> str:
    """Generate a UUID-based filename while preserving the original extension."""
    ext = ""
    if original_filename:
        _, ext = os.path.splitext(original_filename)
        ext = ext.lower()
        if ext and not re.match(r"^\.[a-z0-9]+$", ext):
            ext = ""

    unique_id = uuid.uuid4().hex
    if prefix:
        return f"{prefix}-{unique_id}{ext}"
    return f"{unique_id}{ext}"


def is_safe_path(base_path: Path, target_path: Path) -> bool:
    """Check if a target path is safely within the base path."""
    try:
        target_path.resolve().relative_to(base_path.resolve())
        return True
    except ValueError:
        return False


def validate_image_upload(upload: UploadFile) -> str:
    """Check extension and MIME type; returns the lowercase extension."""
    _, ext = os.path.splitext((upload.filename or "").lower())
    if ext not in ALLOWED_IMAGE_EXTENSIONS or upload.content_type not in ALLOWED_IMAGE_MIMETYPES:
        raise ValidationError("Only image files (jpg, png, gif, webp) are allowed")
    return ext


async def save_menu_image(upload: UploadFile, upload_dir: str, max_size: int) -> str:
    """Persist an uploaded menu image and return its public path.

    Raises ValidationError for non-images and files larger than *max_size*
    bytes; a partially written file is removed.
    """
    validate_image_upload(upload)

    target_dir = Path(upload_dir) / MENU_UPLOAD_SUBDIR
    target_dir.mkdir(parents=True, exist_ok=True)

    filename = generate_secure_filename(upload.filename or "", prefix="menu")
    target = target_dir / filename
    if not is_safe_path(target_dir, target):
        raise ValidationError("Invalid file path")

    written = 0
    try:
        with open(target, "wb") as out:
            while chunk := await upload.read(READ_CHUNK_SIZE):
                written += len(chunk)
                if written > max_size:
                    raise ValidationError(
                        f"File too large. Maximum size is {max_size // (1024 * 1024)}MB"
                    )
                out.write(chunk)
    except ValidationError:
        target.unlink(missing_ok=True)
        raise

    logger.info(f"Stored menu image {filename} ({written} bytes)")
    return f"{UPLOAD_URL_PREFIX}/{MENU_UPLOAD_SUBDIR}/{filename}"


def remove_menu_image(public_path: str, upload_dir: str) -> None:
    """Delete a stored image given its ``/uploads/...`` path; unknown paths are ignored."""
    prefix = f"{UPLOAD_URL_PREFIX}/"
    if not public_path or not public_path.startswith(prefix):
        return
    base = Path(upload_dir)
    target = base / public_path[len(prefix):]
    if is_safe_path(base, target):
        target.unlink(missing_ok=True)
