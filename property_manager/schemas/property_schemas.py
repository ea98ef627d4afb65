import uuid
from datetime import datetime
from pydantic import BaseModel, Field


class PropertyCreate(BaseModel):
    """Schema for creating a new property"""

    name: str = Field(..., min_length=1, max_length=255)
    street: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)
    zip_code: str | None = Field(None, max_length=20)


class PropertyResponse(BaseModel):
    """Schema for property response"""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    street: str | None
    city: str | None
    state: str | None
    zip_code: str | None
    created_at: datetime
    updated_at: datetime


class PropertyListResponse(BaseModel):
    """Schema for list of properties"""

    properties: list[PropertyResponse]
    total: int


class ExpenseCategoryResponse(BaseModel):
    """Schema for expense category response"""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    schedule_e_line: str | None
    sort_order: int
