"""
Two-phase direct upload protocol.

Phase 1 hands the client a presigned PUT URL and a storage key that embeds
the caller's account id. Phase 2 checks that key against the caller,
verifies the object actually landed in storage, renders a thumbnail, and
returns what the caller needs to create the durable row.
"""

from dataclasses import dataclass
from datetime import datetime

from property_manager.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from property_manager.core.log_sanitizer import mask_storage_key
from property_manager.core.storage_keys import (
    UploadCategory,
    build_storage_keys,
    parse_storage_key,
    thumbnail_key_for,
    validate_upload,
)
from property_manager.logging_config import get_logger
from property_manager.models.tenant_context import TenantContext
from property_manager.services.storage_service import StorageService
from property_manager.services.thumbnail_service import (
    THUMBNAIL_CONTENT_TYPE,
    generate_thumbnail,
    is_thumbnailable,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadUrl:
    """Result of phase 1"""

    upload_url: str
    storage_key: str
    thumbnail_storage_key: str
    expires_at: datetime


@dataclass(frozen=True)
class ConfirmedUpload:
    """Result of phase 2; thumbnail_storage_key is None when no thumbnail was made"""

    storage_key: str
    thumbnail_storage_key: str | None
    content_type: str
    file_size_bytes: int


class UploadService:
    """Issues upload URLs and confirms completed uploads"""

    def __init__(self, storage: StorageService):
        self.storage = storage

    def generate_upload_url(
        self,
        context: TenantContext,
        category: UploadCategory,
        content_type: str,
        file_size_bytes: int,
        original_file_name: str,
    ) -> UploadUrl:
        """
        Validate the upload request and issue a presigned PUT URL.

        No row is created; the object may never be uploaded.

        Raises:
            ValidationException: If content type, size or file name are invalid
        """
        extension = validate_upload(category, content_type, file_size_bytes, original_file_name)
        storage_key, thumbnail_key = build_storage_keys(context.account_id, category, extension)

        presigned = self.storage.generate_presigned_upload_url(
            storage_key, content_type.lower(), file_size_bytes
        )

        logger.info(
            "upload_url_generated",
            category=category.value,
            storage_key=mask_storage_key(storage_key),
        )

        return UploadUrl(
            upload_url=presigned.url,
            storage_key=storage_key,
            thumbnail_storage_key=thumbnail_key,
            expires_at=presigned.expires_at,
        )

    def verify_ownership(
        self,
        context: TenantContext,
        category: UploadCategory,
        storage_key: str,
        thumbnail_storage_key: str | None,
    ) -> None:
        """
        Check that the keys are well formed, were issued for this kind of
        document and belong to the caller's account.

        Raises:
            ValidationException: If a key is malformed, was issued for another
                category, or the thumbnail key is not the one paired with the
                storage key
            ForbiddenException: If the key's account segment is not the caller's
        """
        parsed = parse_storage_key(storage_key)

        if parsed.account_id != context.account_id:
            logger.warning(
                "upload_confirm_account_mismatch",
                storage_key=mask_storage_key(storage_key),
            )
            raise ForbiddenException("Cannot confirm upload for another account")

        if parsed.category != category.value:
            raise ValidationException(
                f"Storage key was not issued for {category.value} uploads"
            )

        # Checked against the derived key only, so a thumbnail key under another
        # account is reported as a mismatch rather than as a foreign key.
        expected_thumbnail_key = thumbnail_key_for(storage_key)
        if thumbnail_storage_key is not None and thumbnail_storage_key != expected_thumbnail_key:
            raise ValidationException("Thumbnail storage key does not match storage key")

    def confirm_upload(
        self,
        context: TenantContext,
        category: UploadCategory,
        storage_key: str,
        thumbnail_storage_key: str | None,
        content_type: str,
        file_size_bytes: int,
    ) -> ConfirmedUpload:
        """
        Confirm that a client finished uploading an object.

        Steps: key ownership check, object existence check, thumbnail
        generation. Thumbnail failures are logged and yield a confirmation
        without a thumbnail.

        Raises:
            ValidationException: Malformed key or key issued for another category
            ForbiddenException: Key belongs to another account
            NotFoundException: Object was never uploaded
        """
        self.verify_ownership(context, category, storage_key, thumbnail_storage_key)

        info = self.storage.stat_object(storage_key)
        if info is None:
            raise NotFoundException("Uploaded file not found in storage")

        confirmed_thumbnail_key = None
        if thumbnail_storage_key and is_thumbnailable(content_type):
            confirmed_thumbnail_key = self._create_thumbnail(storage_key, thumbnail_storage_key)

        logger.info(
            "upload_confirmed",
            storage_key=mask_storage_key(storage_key),
            has_thumbnail=confirmed_thumbnail_key is not None,
        )

        return ConfirmedUpload(
            storage_key=storage_key,
            thumbnail_storage_key=confirmed_thumbnail_key,
            content_type=content_type.lower(),
            file_size_bytes=file_size_bytes,
        )

    def _create_thumbnail(self, storage_key: str, thumbnail_storage_key: str) -> str | None:
        try:
            original = self.storage.get_object(storage_key)
            thumbnail = generate_thumbnail(original)
            self.storage.put_object(thumbnail_storage_key, thumbnail, THUMBNAIL_CONTENT_TYPE)
        except Exception:
            logger.warning(
                "thumbnail_generation_failed",
                storage_key=mask_storage_key(storage_key),
                exc_info=True,
            )
            return None
        return thumbnail_storage_key

    def delete_objects_best_effort(self, storage_keys: list[str | None]) -> bool:
        """
        Delete storage objects without letting failures reach the caller.

        Failures are logged for the out-of-band cleanup job.

        Returns:
            True if deletion succeeded
        """
        keys = [key for key in storage_keys if key]
        try:
            self.storage.delete_objects(keys)
        except Exception:
            logger.warning(
                "storage_delete_failed",
                storage_keys=[mask_storage_key(key) for key in keys],
                exc_info=True,
            )
            return False
        return True

    def download_url(self, storage_key: str | None) -> str | None:
        """Presigned GET URL for a key, or None when there is no key"""
        if not storage_key:
            return None
        return self.storage.generate_presigned_download_url(storage_key)
