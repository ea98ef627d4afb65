import uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from property_manager.core.exceptions import ConflictException, NotFoundException, ValidationException
from property_manager.core.storage_keys import UploadCategory
from property_manager.core.tenant_scope import TenantScope
from property_manager.logging_config import get_logger
from property_manager.models.property_photo import PropertyPhoto
from property_manager.models.tenant_context import TenantContext
from property_manager.repositories.property_photo_repository import PropertyPhotoRepository
from property_manager.repositories.property_repository import PropertyRepository
from property_manager.schemas.photo_schemas import PhotoConfirmRequest, PhotoUploadUrlRequest
from property_manager.services.storage_service import StorageService
from property_manager.services.upload_service import UploadService, UploadUrl

logger = get_logger(__name__)


class PropertyPhotoService:
    """
    Service layer for property photos.

    Maintains, per property:
    - exactly one primary photo whenever the property has photos
    - display_order as a dense 0..n-1 sequence after each reorder
    """

    def __init__(self, db: Session, storage: StorageService):
        self.db = db
        self.photo_repo = PropertyPhotoRepository(db)
        self.property_repo = PropertyRepository(db)
        self.uploads = UploadService(storage)

    def _require_property(self, property_id: uuid.UUID, scope: TenantScope) -> None:
        if not self.property_repo.exists(property_id, scope):
            raise NotFoundException(f"Property {property_id} not found")

    def _require_photo(
        self, photo_id: uuid.UUID, property_id: uuid.UUID, scope: TenantScope
    ) -> PropertyPhoto:
        photo = self.photo_repo.get_by_id(photo_id, property_id, scope)
        if not photo:
            raise NotFoundException(f"Photo {photo_id} not found")
        return photo

    def _to_view(self, photo: PropertyPhoto) -> dict:
        return {
            "id": photo.id,
            "property_id": photo.property_id,
            "view_url": self.uploads.download_url(photo.storage_key),
            "thumbnail_url": self.uploads.download_url(photo.thumbnail_storage_key),
            "is_primary": photo.is_primary,
            "display_order": photo.display_order,
            "original_file_name": photo.original_file_name,
            "content_type": photo.content_type,
            "file_size_bytes": photo.file_size_bytes,
            "created_at": photo.created_at,
        }

    def generate_upload_url(
        self, property_id: uuid.UUID, request: PhotoUploadUrlRequest, context: TenantContext
    ) -> UploadUrl:
        """
        Issue a presigned upload URL for a new property photo.

        Raises:
            NotFoundException: If property doesn't exist for the caller's account
            ValidationException: If content type, size or file name are invalid
        """
        self._require_property(property_id, TenantScope.for_context(context))
        return self.uploads.generate_upload_url(
            context,
            UploadCategory.PROPERTIES,
            request.content_type,
            request.file_size_bytes,
            request.original_file_name,
        )

    def confirm_upload(
        self, property_id: uuid.UUID, request: PhotoConfirmRequest, context: TenantContext
    ) -> dict:
        """
        Create the photo record for a completed upload.

        The first photo of a property becomes primary; every photo is placed
        after the current last one.

        Raises:
            NotFoundException: If property doesn't exist or the object was never uploaded
            ValidationException: If the storage key is malformed or not a photo key
            ForbiddenException: If the storage key belongs to another account
            ConflictException: If a photo already holds the storage key
        """
        scope = TenantScope.for_context(context)
        self._require_property(property_id, scope)

        if self.photo_repo.storage_key_exists(request.storage_key, scope):
            raise ConflictException("Upload has already been confirmed")

        confirmed = self.uploads.confirm_upload(
            context,
            UploadCategory.PROPERTIES,
            request.storage_key,
            request.thumbnail_storage_key,
            request.content_type,
            request.file_size_bytes,
        )

        is_first_photo = self.photo_repo.count_by_property(property_id, scope) == 0
        max_order = self.photo_repo.get_max_display_order(property_id, scope)

        photo = PropertyPhoto(
            account_id=context.account_id,
            property_id=property_id,
            storage_key=confirmed.storage_key,
            thumbnail_storage_key=confirmed.thumbnail_storage_key,
            original_file_name=request.original_file_name.strip(),
            content_type=confirmed.content_type,
            file_size_bytes=confirmed.file_size_bytes,
            display_order=0 if max_order is None else max_order + 1,
            is_primary=is_first_photo,
            created_by_user_id=context.user_id,
        )
        try:
            photo = self.photo_repo.create(photo)
        except IntegrityError:
            self.db.rollback()
            raise ConflictException("Upload has already been confirmed")

        logger.info(
            "property_photo_confirmed",
            property_id=str(property_id),
            photo_id=str(photo.id),
            is_primary=photo.is_primary,
            display_order=photo.display_order,
        )
        return self._to_view(photo)

    def get_photos(self, property_id: uuid.UUID, context: TenantContext) -> list[dict]:
        """
        Get all photos of a property ordered by display order.

        Raises:
            NotFoundException: If property doesn't exist for the caller's account
        """
        scope = TenantScope.for_context(context)
        self._require_property(property_id, scope)
        return [self._to_view(photo) for photo in self.photo_repo.get_by_property(property_id, scope)]

    def set_primary(self, property_id: uuid.UUID, photo_id: uuid.UUID, context: TenantContext) -> None:
        """
        Make a photo the primary photo of its property.

        The old primary is cleared and flushed before the new one is set, so
        the one-primary-per-property index is never violated; both steps
        commit together.

        Raises:
            NotFoundException: If the photo doesn't exist for this property and account
        """
        scope = TenantScope.for_context(context)
        photo = self._require_photo(photo_id, property_id, scope)

        if photo.is_primary:
            return

        current = self.photo_repo.get_primary(property_id, scope)
        if current is not None:
            current.is_primary = False
            self.photo_repo.save_no_commit(current)

        photo.is_primary = True
        self.photo_repo.save_no_commit(photo)
        self.db.commit()

        logger.info(
            "property_photo_primary_set",
            property_id=str(property_id),
            photo_id=str(photo_id),
            previous_primary_id=str(current.id) if current else None,
        )

    def delete_photo(self, property_id: uuid.UUID, photo_id: uuid.UUID, context: TenantContext) -> None:
        """
        Delete a photo and its storage objects.

        If the deleted photo was primary, the remaining photo with the lowest
        display order is promoted. Storage deletion happens after the commit
        and its failure is only logged.

        Raises:
            NotFoundException: If the photo doesn't exist for this property and account
        """
        scope = TenantScope.for_context(context)
        photo = self._require_photo(photo_id, property_id, scope)

        was_primary = photo.is_primary
        storage_keys = [photo.storage_key, photo.thumbnail_storage_key]

        self.photo_repo.delete_no_commit(photo)

        promoted = None
        if was_primary:
            promoted = self.photo_repo.get_first_in_order(property_id, scope)
            if promoted is not None:
                promoted.is_primary = True
                self.photo_repo.save_no_commit(promoted)

        self.db.commit()

        logger.info(
            "property_photo_deleted",
            property_id=str(property_id),
            photo_id=str(photo_id),
            promoted_photo_id=str(promoted.id) if promoted else None,
        )

        if not self.uploads.delete_objects_best_effort(storage_keys):
            logger.warning("photo_storage_delete_failed", photo_id=str(photo_id))

    def reorder(
        self, property_id: uuid.UUID, photo_ids: list[uuid.UUID], context: TenantContext
    ) -> None:
        """
        Set the display order of all photos of a property.

        photo_ids must list every photo of the property exactly once;
        display_order becomes each photo's position in the list.

        Raises:
            NotFoundException: If property doesn't exist for the caller's account
            ValidationException: If photo_ids is not a permutation of the property's photos
        """
        scope = TenantScope.for_context(context)
        self._require_property(property_id, scope)

        photos = self.photo_repo.get_by_property(property_id, scope)
        photos_by_id = {photo.id: photo for photo in photos}

        if len(set(photo_ids)) != len(photo_ids):
            raise ValidationException("Photo IDs must not contain duplicates")
        if len(photo_ids) != len(photos_by_id):
            raise ValidationException(
                f"Expected {len(photos_by_id)} photo IDs, got {len(photo_ids)}"
            )
        unknown = [photo_id for photo_id in photo_ids if photo_id not in photos_by_id]
        if unknown:
            raise ValidationException(f"Photo IDs do not belong to this property: {unknown[0]}")

        self.photo_repo.set_display_orders_no_commit(photos_by_id, photo_ids)
        self.db.commit()

        logger.info(
            "property_photos_reordered",
            property_id=str(property_id),
            photo_count=len(photo_ids),
        )
