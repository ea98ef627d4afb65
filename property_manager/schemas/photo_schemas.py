import uuid
from datetime import datetime
from pydantic import BaseModel, Field


class PhotoUploadUrlRequest(BaseModel):
    """Schema for requesting a property photo upload URL"""

    content_type: str = Field(..., max_length=100)
    file_size_bytes: int
    original_file_name: str = Field(..., max_length=255)


class UploadUrlResponse(BaseModel):
    """Presigned upload URL with the storage keys to confirm afterwards"""

    model_config = {"from_attributes": True}

    upload_url: str
    storage_key: str
    thumbnail_storage_key: str
    expires_at: datetime


class PhotoConfirmRequest(BaseModel):
    """Schema for confirming a completed photo upload"""

    storage_key: str = Field(..., max_length=500)
    thumbnail_storage_key: str = Field(..., max_length=500)
    content_type: str = Field(..., max_length=100)
    file_size_bytes: int = Field(..., gt=0)
    original_file_name: str = Field(..., min_length=1, max_length=255)


class PropertyPhotoResponse(BaseModel):
    """Schema for property photo response"""

    id: uuid.UUID
    property_id: uuid.UUID
    view_url: str | None
    thumbnail_url: str | None
    is_primary: bool
    display_order: int
    original_file_name: str
    content_type: str
    file_size_bytes: int
    created_at: datetime


class PropertyPhotoListResponse(BaseModel):
    """Schema for list of property photos"""

    items: list[PropertyPhotoResponse]
    total: int


class ReorderPhotosRequest(BaseModel):
    """All photo IDs of the property, in the desired order"""

    photo_ids: list[uuid.UUID]
