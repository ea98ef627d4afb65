import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from property_manager.database import get_db
from property_manager.dependencies import get_tenant_context
from property_manager.models.tenant_context import TenantContext
from property_manager.services.property_photo_service import PropertyPhotoService
from property_manager.services.storage_service import StorageService, get_storage_service
from property_manager.schemas.photo_schemas import (
    PhotoUploadUrlRequest,
    PhotoConfirmRequest,
    UploadUrlResponse,
    PropertyPhotoResponse,
    PropertyPhotoListResponse,
    ReorderPhotosRequest,
)

router = APIRouter()


@router.post("/{property_id}/photos/upload-url", response_model=UploadUrlResponse)
def generate_upload_url(
    property_id: uuid.UUID,
    request: PhotoUploadUrlRequest,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Get a presigned URL for uploading a property photo directly to storage.

    - Returns the storage key and thumbnail key to confirm after upload
    - Returns 400 for disallowed content types or oversized files
    - Returns 404 if property doesn't exist or doesn't belong to the account
    """
    service = PropertyPhotoService(db, storage)
    return service.generate_upload_url(property_id, request, context)


@router.post(
    "/{property_id}/photos",
    response_model=PropertyPhotoResponse,
    status_code=status.HTTP_201_CREATED,
)
def confirm_upload(
    property_id: uuid.UUID,
    request: PhotoConfirmRequest,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Confirm an uploaded photo and create its record.

    - First photo of a property becomes primary
    - Returns 403 if the storage key belongs to another account
    - Returns 400 if the storage key was not issued for a property photo
    - Returns 404 if the property or the uploaded object doesn't exist
    - Returns 409 if the storage key is already confirmed
    """
    service = PropertyPhotoService(db, storage)
    return service.confirm_upload(property_id, request, context)


@router.get("/{property_id}/photos", response_model=PropertyPhotoListResponse)
def list_photos(
    property_id: uuid.UUID,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    """
    List a property's photos ordered by display order, with presigned URLs.
    """
    service = PropertyPhotoService(db, storage)
    photos = service.get_photos(property_id, context)
    return PropertyPhotoListResponse(items=photos, total=len(photos))


@router.put("/{property_id}/photos/reorder", status_code=status.HTTP_204_NO_CONTENT)
def reorder_photos(
    property_id: uuid.UUID,
    request: ReorderPhotosRequest,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Reorder a property's photos.

    - photo_ids must contain every photo of the property exactly once
    - Returns 400 otherwise, without changing anything
    """
    service = PropertyPhotoService(db, storage)
    service.reorder(property_id, request.photo_ids, context)


@router.put("/{property_id}/photos/{photo_id}/primary", status_code=status.HTTP_204_NO_CONTENT)
def set_primary_photo(
    property_id: uuid.UUID,
    photo_id: uuid.UUID,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Make a photo the property's primary photo.

    - No-op if it already is
    - Returns 404 if photo doesn't exist for this property and account
    """
    service = PropertyPhotoService(db, storage)
    service.set_primary(property_id, photo_id, context)


@router.delete("/{property_id}/photos/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_photo(
    property_id: uuid.UUID,
    photo_id: uuid.UUID,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Delete a photo and its stored files.

    - Deleting the primary photo promotes the next photo in display order
    - Returns 404 if photo doesn't exist for this property and account
    """
    service = PropertyPhotoService(db, storage)
    service.delete_photo(property_id, photo_id, context)
