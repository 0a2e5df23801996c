"""
Avatar Service

Validates uploaded avatar images and stores them in object storage.
"""

import logging
import secrets
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError, ValidationError
from app.services import user_service
from app.services.storage_service import ObjectStorage


logger = logging.getLogger(__name__)

MAX_AVATAR_BYTES = 5 * 1024 * 1024  # 5 MB
SNIFF_LENGTH = 512

# content type -> file extension
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def detect_image_type(data: bytes) -> Optional[str]:
    """
    Detect the image type from the leading bytes.

    Only the first 512 bytes are inspected. Filenames and client-declared
    content types are never consulted.

    Returns:
        The content type, or None when it is not a supported image.
    """
    head = data[:SNIFF_LENGTH]

    if head.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if head.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if head.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if head[:4] == b"RIFF" and head[8:14] == b"WEBPVP":
        return "image/webp"
    return None


def generate_storage_key(account_id: uuid.UUID, extension: str) -> str:
    """Object key in the form ``{account_id}/{32 hex chars}{extension}``."""
    return f"{account_id}/{secrets.token_hex(16)}{extension}"


async def replace_avatar(
    db: AsyncSession,
    storage: ObjectStorage,
    account_id: uuid.UUID,
    data: bytes,
) -> str:
    """
    Validate, upload and attach a new avatar.

    Args:
        db: Database session.
        storage: Object storage provider.
        account_id: Owner of the avatar.
        data: Raw file contents.

    Returns:
        str: Public URL of the stored avatar.

    Raises:
        ValidationError: If the file is too large or not a supported image.
    """
    if len(data) > MAX_AVATAR_BYTES:
        raise ValidationError("file too large (max 5 MB)")

    content_type = detect_image_type(data)
    if content_type is None:
        raise ValidationError("only JPEG, PNG, WebP, and GIF images are allowed")

    key = generate_storage_key(account_id, ALLOWED_IMAGE_TYPES[content_type])
    await storage.upload(key, data, content_type)

    try:
        previous_key = await user_service.update_avatar_key(db, account_id, key)
    except Exception:
        await storage.delete(key)
        raise

    if previous_key and previous_key != key:
        try:
            await storage.delete(previous_key)
        except StorageError:
            logger.warning(f"Could not delete previous avatar {previous_key} for {account_id}")

    return storage.public_url(key)
