import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from property_manager.database import get_db
from property_manager.dependencies import get_tenant_context
from property_manager.models.tenant_context import TenantContext
from property_manager.services.property_service import PropertyService
from property_manager.schemas.property_schemas import (
    PropertyCreate,
    PropertyResponse,
    PropertyListResponse,
    ExpenseCategoryResponse,
)

router = APIRouter()
categories_router = APIRouter()


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
def create_property(
    data: PropertyCreate,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """Create a new property owned by the caller's account."""
    service = PropertyService(db)
    return service.create_property(data, context)


@router.get("", response_model=PropertyListResponse)
def list_properties(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """List the caller's properties."""
    service = PropertyService(db)
    properties = service.get_properties(context)
    return PropertyListResponse(properties=properties, total=len(properties))


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(
    property_id: uuid.UUID,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Get a property by ID.

    - Returns 404 if property doesn't exist or doesn't belong to the account
    """
    service = PropertyService(db)
    return service.get_property(property_id, context)


@categories_router.get("", response_model=list[ExpenseCategoryResponse])
def list_expense_categories(
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """List the global expense categories."""
    service = PropertyService(db)
    return service.get_expense_categories()
