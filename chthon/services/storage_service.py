from __future__ import annotations

import secrets
import string
import time
from pathlib import Path
from typing import Optional

from loguru import logger

from chthon.core.config import settings

UPLOADS_ROUTE = '/uploads'

_ALPHABET = string.ascii_lowercase + string.digits
# Stored extensions come from the validated content type only.
_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/gif': 'gif',
    'image/webp': 'webp',
}
ALLOWED_IMAGE_TYPES = frozenset(_EXTENSIONS)


class UploadRejected(ValueError):
    def __init__(self, message: str, status_code: int, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


def upload_root() -> Path:
    return Path(settings.UPLOAD_DIR).expanduser().resolve()


def generate_filename(content_type: str) -> str:
    stamp = int(time.time() * 1000)
    suffix = ''.join(secrets.choice(_ALPHABET) for _ in range(8))
    return f"{stamp}-{suffix}.{_EXTENSIONS[content_type]}"


def public_url(filename: str) -> str:
    return f"{settings.PUBLIC_BASE_URL}{UPLOADS_ROUTE}/{filename}"


def validate_upload(size: int, content_type: Optional[str]) -> None:
    if size > settings.UPLOAD_MAX_BYTES:
        limit_mb = settings.UPLOAD_MAX_BYTES // (1024 * 1024)
        raise UploadRejected(
            f"File size exceeds {limit_mb}MB limit. Please compress your image or use a smaller one.",
            413,
            code='FILE_TOO_LARGE',
        )
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise UploadRejected('Invalid file type', 400)


def store_image(contents: bytes, filename: Optional[str], content_type: Optional[str]) -> str:
    """Validate and write an uploaded image; returns its public URL."""
    validate_upload(len(contents), content_type)
    name = generate_filename(content_type)
    root = upload_root()
    root.mkdir(parents=True, exist_ok=True)
    (root / name).write_bytes(contents)
    logger.info('upload.stored', filename=name, original=filename, content_type=content_type, size=len(contents))
    return public_url(name)
