"""
Storage key layout and upload validation rules.

Keys are laid out as ``{account_id}/{category}/{year}/{file_id}{ext}``.
The leading segment binds an uploaded object to its tenant and is checked
whenever an upload is confirmed.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import Enum as PyEnum

from property_manager.config import settings
from property_manager.core.exceptions import ValidationException


class UploadCategory(str, PyEnum):
    """Kinds of documents that can be uploaded"""

    PROPERTIES = "properties"
    RECEIPTS = "receipts"


PHOTO_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
}

RECEIPT_CONTENT_TYPES: dict[str, str] = {
    **PHOTO_CONTENT_TYPES,
    "application/pdf": ".pdf",
}

ALLOWED_CONTENT_TYPES: dict[UploadCategory, dict[str, str]] = {
    UploadCategory.PROPERTIES: PHOTO_CONTENT_TYPES,
    UploadCategory.RECEIPTS: RECEIPT_CONTENT_TYPES,
}

THUMBNAIL_SUFFIX = "_thumb.jpg"


@dataclass(frozen=True)
class StorageKey:
    """Parsed components of a storage key"""

    account_id: uuid.UUID
    category: str
    year: str
    file_name: str

    @property
    def prefix(self) -> str:
        return f"{self.account_id}/{self.category}/{self.year}/"


def validate_upload(
    category: UploadCategory, content_type: str, file_size_bytes: int, original_file_name: str
) -> str:
    """
    Validate an upload request against the category allow-list and size limit.

    Returns:
        File extension (with leading dot) for the content type

    Raises:
        ValidationException: On empty file, oversized file, disallowed type or missing name
    """
    if file_size_bytes <= 0:
        raise ValidationException("File size must be greater than zero")

    if file_size_bytes > settings.MAX_UPLOAD_SIZE_BYTES:
        raise ValidationException(
            f"File size {file_size_bytes} bytes exceeds maximum allowed size "
            f"of {settings.MAX_UPLOAD_SIZE_BYTES} bytes"
        )

    allowed = ALLOWED_CONTENT_TYPES[category]
    normalized = (content_type or "").strip().lower()
    if normalized not in allowed:
        raise ValidationException(
            f"Content type '{content_type}' is not allowed. "
            f"Allowed types: {', '.join(allowed)}"
        )

    if not original_file_name or not original_file_name.strip():
        raise ValidationException("Original file name is required")

    return allowed[normalized]


def build_storage_keys(
    account_id: uuid.UUID, category: UploadCategory, extension: str
) -> tuple[str, str]:
    """
    Generate a fresh storage key and its parallel thumbnail key.

    Returns:
        Tuple of (storage_key, thumbnail_storage_key)
    """
    year = datetime.now(UTC).year
    file_id = uuid.uuid4()
    base = f"{account_id}/{category.value}/{year}/{file_id}"
    return f"{base}{extension}", f"{base}{THUMBNAIL_SUFFIX}"


def thumbnail_key_for(storage_key: str) -> str:
    """Derive the thumbnail key that pairs with a storage key."""
    head, _, tail = storage_key.rpartition("/")
    stem = tail.rsplit(".", 1)[0]
    return f"{head}/{stem}{THUMBNAIL_SUFFIX}"


def parse_storage_key(storage_key: str) -> StorageKey:
    """
    Split a storage key into its components.

    Raises:
        ValidationException: If the key does not follow the expected layout
    """
    if not storage_key:
        raise ValidationException("Invalid storage key format")

    parts = storage_key.split("/")
    if len(parts) != 4 or any(not part or part in (".", "..") for part in parts):
        raise ValidationException("Invalid storage key format")

    try:
        account_id = uuid.UUID(parts[0])
    except ValueError:
        raise ValidationException("Invalid storage key format")

    return StorageKey(account_id=account_id, category=parts[1], year=parts[2], file_name=parts[3])
