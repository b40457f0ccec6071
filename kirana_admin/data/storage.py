"""
Product and store image storage on Supabase Storage.
"""

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from supabase import Client

from ..core.config import ALLOWED_IMAGE_TYPES, IMAGE_BUCKETS, MAX_IMAGE_SIZE_BYTES
from ..core.errors import BackendError, ImageValidationError

logger = logging.getLogger(__name__)

CACHE_CONTROL_SECONDS = "3600"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass
class ImageUploadResult:
    url: str
    path: str


def validate_image(data: bytes, content_type: str) -> None:
    """Raise ``ImageValidationError`` for oversize or unsupported images."""
    if len(data) > MAX_IMAGE_SIZE_BYTES:
        raise ImageValidationError("File size must be less than 5MB")
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ImageValidationError("Only JPEG, PNG, and WebP images are allowed")


def _check_bucket(bucket: str) -> None:
    if bucket not in IMAGE_BUCKETS:
        raise ValueError(f"Unknown bucket {bucket!r}")


def unique_file_name(original_name: str, now_ms: Optional[int] = None) -> str:
    """``<random>-<epoch millis>.<original extension>``"""
    ext = original_name.rsplit(".", 1)[-1] if "." in original_name else original_name
    token = "".join(secrets.choice(_BASE36) for _ in range(11))
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{token}-{millis}.{ext}"


def upload_image(
    client: Client,
    data: bytes,
    file_name: str,
    content_type: str,
    bucket: str,
    folder: Optional[str] = None,
) -> ImageUploadResult:
    """
    Upload an image and return its public URL and storage path.

    Existing objects are never overwritten.
    """
    _check_bucket(bucket)
    validate_image(data, content_type)

    name = unique_file_name(file_name)
    path = f"{folder}/{name}" if folder else name

    try:
        client.storage.from_(bucket).upload(
            path,
            data,
            {
                "content-type": content_type,
                "cache-control": CACHE_CONTROL_SECONDS,
                "upsert": "false",
            },
        )
    except Exception as e:
        logger.error("Image upload to %s failed: %s", bucket, e)
        raise BackendError(f"Upload failed: {e}") from e

    logger.info("Uploaded image %s/%s", bucket, path)
    return ImageUploadResult(url=get_image_url(client, path, bucket), path=path)


def delete_image(client: Client, path: str, bucket: str) -> None:
    _check_bucket(bucket)
    try:
        client.storage.from_(bucket).remove([path])
    except Exception as e:
        logger.error("Image delete from %s failed: %s", bucket, e)
        raise BackendError(f"Delete failed: {e}") from e


def get_image_url(client: Client, path: str, bucket: str) -> str:
    _check_bucket(bucket)
    return client.storage.from_(bucket).get_public_url(path)
