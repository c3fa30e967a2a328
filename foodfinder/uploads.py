from __future__ import annotations

from pathlib import PurePath

ALLOWED_IMAGE_TYPES = {"jpeg", "jpg", "png", "gif", "webp"}
MAX_IMAGE_BYTES = 10 * 1024 * 1024


class UploadRejected(Exception):
    """An uploaded file is not an acceptable dish photo."""


def validate_image_upload(filename: str | None, content_type: str | None, data: bytes) -> None:
    """Raise ``UploadRejected`` unless the file is a non-empty image of at most 10MB."""
    extension = PurePath(filename or "").suffix.lower().lstrip(".")
    subtype = (content_type or "").lower().partition("/")[2]

    if extension not in ALLOWED_IMAGE_TYPES or subtype not in ALLOWED_IMAGE_TYPES:
        raise UploadRejected("Only image files are allowed (jpeg, jpg, png, gif, webp)")
    if not data:
        raise UploadRejected("No image file provided")
    if len(data) > MAX_IMAGE_BYTES:
        raise UploadRejected("File too large. Maximum size is 10MB.")
