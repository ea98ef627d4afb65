import uuid
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from property_manager.database import get_db
from property_manager.dependencies import get_tenant_context
from property_manager.models.tenant_context import TenantContext
from property_manager.services.notification_service import ReceiptNotifier, get_receipt_notifier
from property_manager.services.receipt_service import ReceiptService
from property_manager.services.storage_service import StorageService, get_storage_service
from property_manager.schemas.photo_schemas import UploadUrlResponse
from property_manager.schemas.receipt_schemas import (
    ReceiptUploadUrlRequest,
    ReceiptCreate,
    ReceiptCreateResponse,
    ReceiptResponse,
    UnprocessedReceiptsResponse,
    ReceiptProcess,
    ProcessReceiptResponse,
)

router = APIRouter()


def get_receipt_service(
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service),
    notifier: ReceiptNotifier = Depends(get_receipt_notifier),
) -> ReceiptService:
    return ReceiptService(db, storage, notifier)


@router.post("/upload-url", response_model=UploadUrlResponse)
def generate_upload_url(
    request: ReceiptUploadUrlRequest,
    context: TenantContext = Depends(get_tenant_context),
    service: ReceiptService = Depends(get_receipt_service),
):
    """
    Get a presigned URL for uploading a receipt image or PDF.

    - Returns 400 for disallowed content types or oversized files
    """
    return service.generate_upload_url(request, context)


@router.post("", response_model=ReceiptCreateResponse, status_code=status.HTTP_201_CREATED)
def create_receipt(
    request: ReceiptCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: ReceiptService = Depends(get_receipt_service),
):
    """
    Record an uploaded receipt.

    - Receipt starts unprocessed
    - Returns 403 if the storage key belongs to another account
    - Returns 400 if the storage key was not issued for a receipt
    - Returns 404 if property or uploaded object doesn't exist
    - Returns 409 if a receipt already exists for the storage key
    """
    return service.create_receipt(request, context)


@router.get("/unprocessed", response_model=UnprocessedReceiptsResponse)
def list_unprocessed_receipts(
    context: TenantContext = Depends(get_tenant_context),
    service: ReceiptService = Depends(get_receipt_service),
):
    """
    List receipts waiting to be processed, newest first.
    """
    items, total = service.get_unprocessed(context)
    return UnprocessedReceiptsResponse(items=items, total_count=total)


@router.get("/{receipt_id}", response_model=ReceiptResponse)
def get_receipt(
    receipt_id: uuid.UUID,
    context: TenantContext = Depends(get_tenant_context),
    service: ReceiptService = Depends(get_receipt_service),
):
    """
    Get a receipt by ID.

    - Returns 404 if receipt doesn't exist, was deleted or belongs to another account
    """
    return service.get_receipt(receipt_id, context)


@router.post(
    "/{receipt_id}/process",
    response_model=ProcessReceiptResponse,
    status_code=status.HTTP_201_CREATED,
)
def process_receipt(
    receipt_id: uuid.UUID,
    request: ReceiptProcess,
    context: TenantContext = Depends(get_tenant_context),
    service: ReceiptService = Depends(get_receipt_service),
):
    """
    Create an expense from a receipt.

    - Returns 409 if the receipt was already processed
    - Returns 404 if receipt, property, category or work order doesn't exist
    - Returns 400 if the work order belongs to a different property
    """
    expense = service.process_receipt(receipt_id, request, context)
    return ProcessReceiptResponse(expense_id=expense.id)


@router.delete("/{receipt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_receipt(
    receipt_id: uuid.UUID,
    context: TenantContext = Depends(get_tenant_context),
    service: ReceiptService = Depends(get_receipt_service),
):
    """
    Delete a receipt (soft delete).

    - Returns 404 if receipt doesn't exist or belongs to another account
    """
    service.delete_receipt(receipt_id, context)
