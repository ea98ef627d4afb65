import uuid
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional


class ReceiptUploadUrlRequest(BaseModel):
    """Schema for requesting a receipt upload URL"""

    content_type: str = Field(..., max_length=100)
    file_size_bytes: int
    original_file_name: str = Field(..., max_length=255)
    property_id: Optional[uuid.UUID] = None


class ReceiptCreate(BaseModel):
    """Schema for recording a receipt after the client uploaded it"""

    storage_key: str = Field(..., max_length=500)
    thumbnail_storage_key: Optional[str] = Field(None, max_length=500)
    original_file_name: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., max_length=100)
    file_size_bytes: int = Field(..., gt=0)
    property_id: Optional[uuid.UUID] = None


class ReceiptCreateResponse(BaseModel):
    """Schema for receipt creation response"""

    model_config = {"from_attributes": True}

    id: uuid.UUID


class ReceiptResponse(BaseModel):
    """Schema for receipt response"""

    id: uuid.UUID
    property_id: Optional[uuid.UUID]
    property_name: Optional[str]
    original_file_name: Optional[str]
    content_type: str
    file_size_bytes: Optional[int]
    view_url: Optional[str]
    thumbnail_url: Optional[str]
    expense_id: Optional[uuid.UUID]
    processed_at: Optional[datetime]
    created_at: datetime


class UnprocessedReceiptsResponse(BaseModel):
    """Schema for the unprocessed receipt queue"""

    items: list[ReceiptResponse]
    total_count: int


class ReceiptProcess(BaseModel):
    """Schema for turning a receipt into an expense"""

    property_id: uuid.UUID
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    date: date
    category_id: uuid.UUID
    description: Optional[str] = Field(None, max_length=500)
    work_order_id: Optional[uuid.UUID] = None


class ProcessReceiptResponse(BaseModel):
    """Schema for process receipt response"""

    expense_id: uuid.UUID
