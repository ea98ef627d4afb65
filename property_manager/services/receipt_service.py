import uuid
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from property_manager.core.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationException,
)
from property_manager.core.log_sanitizer import mask_storage_key
from property_manager.core.storage_keys import UploadCategory, thumbnail_key_for
from property_manager.core.tenant_scope import TenantScope
from property_manager.logging_config import get_logger
from property_manager.models.base import utcnow
from property_manager.models.expense import Expense
from property_manager.models.receipt import Receipt
from property_manager.models.tenant_context import TenantContext
from property_manager.repositories.expense_category_repository import ExpenseCategoryRepository
from property_manager.repositories.expense_repository import ExpenseRepository
from property_manager.repositories.property_repository import PropertyRepository
from property_manager.repositories.receipt_repository import ReceiptRepository
from property_manager.repositories.work_order_repository import WorkOrderRepository
from property_manager.schemas.receipt_schemas import (
    ReceiptCreate,
    ReceiptProcess,
    ReceiptUploadUrlRequest,
)
from property_manager.services.notification_service import NotificationOutbox, ReceiptNotifier
from property_manager.services.storage_service import StorageService
from property_manager.services.upload_service import UploadService, UploadUrl

logger = get_logger(__name__)


class ReceiptService:
    """
    Service layer for receipt business logic.

    A receipt is Unprocessed until it is turned into an expense, which
    happens at most once. Receipts are soft-deleted.
    """

    def __init__(self, db: Session, storage: StorageService, notifier: ReceiptNotifier):
        self.db = db
        self.receipt_repo = ReceiptRepository(db)
        self.property_repo = PropertyRepository(db)
        self.category_repo = ExpenseCategoryRepository(db)
        self.work_order_repo = WorkOrderRepository(db)
        self.expense_repo = ExpenseRepository(db)
        self.uploads = UploadService(storage)
        self.outbox = NotificationOutbox(db, notifier)

    def _to_view(self, receipt: Receipt) -> dict:
        return {
            "id": receipt.id,
            "property_id": receipt.property_id,
            "property_name": receipt.property.name if receipt.property else None,
            "original_file_name": receipt.original_file_name,
            "content_type": receipt.content_type or "application/octet-stream",
            "file_size_bytes": receipt.file_size_bytes,
            "view_url": self.uploads.download_url(receipt.storage_key),
            "thumbnail_url": self.uploads.download_url(receipt.thumbnail_storage_key),
            "expense_id": receipt.expense_id,
            "processed_at": receipt.processed_at,
            "created_at": receipt.created_at,
        }

    def generate_upload_url(
        self, request: ReceiptUploadUrlRequest, context: TenantContext
    ) -> UploadUrl:
        """
        Issue a presigned upload URL for a receipt image or PDF.

        Raises:
            NotFoundException: If a property_id is given that the caller can't see
            ValidationException: If content type, size or file name are invalid
        """
        if request.property_id is not None:
            if not self.property_repo.exists(request.property_id, TenantScope.for_context(context)):
                raise NotFoundException(f"Property {request.property_id} not found")

        return self.uploads.generate_upload_url(
            context,
            UploadCategory.RECEIPTS,
            request.content_type,
            request.file_size_bytes,
            request.original_file_name,
        )

    def create_receipt(self, request: ReceiptCreate, context: TenantContext) -> Receipt:
        """
        Create an unprocessed receipt for a completed upload.

        Raises:
            NotFoundException: If the property or the uploaded object doesn't exist
            ValidationException: If the storage key is malformed or not a receipt key
            ForbiddenException: If the storage key belongs to another account
            ConflictException: If a receipt, deleted or not, already holds the storage key
        """
        scope = TenantScope.for_context(context)

        if request.property_id is not None and not self.property_repo.exists(request.property_id, scope):
            raise NotFoundException(f"Property {request.property_id} not found")

        if self.receipt_repo.storage_key_exists(request.storage_key, scope.with_deleted()):
            raise ConflictException("Receipt already exists for this upload")

        thumbnail_key = request.thumbnail_storage_key
        if thumbnail_key is None:
            thumbnail_key = thumbnail_key_for(request.storage_key)

        confirmed = self.uploads.confirm_upload(
            context,
            UploadCategory.RECEIPTS,
            request.storage_key,
            thumbnail_key,
            request.content_type,
            request.file_size_bytes,
        )

        receipt = Receipt(
            account_id=context.account_id,
            storage_key=confirmed.storage_key,
            thumbnail_storage_key=confirmed.thumbnail_storage_key,
            original_file_name=request.original_file_name.strip(),
            content_type=confirmed.content_type,
            file_size_bytes=confirmed.file_size_bytes,
            property_id=request.property_id,
            created_by_user_id=context.user_id,
        )
        try:
            receipt = self.receipt_repo.create(receipt)
        except IntegrityError:
            self.db.rollback()
            raise ConflictException("Receipt already exists for this upload")

        logger.info(
            "receipt_created",
            receipt_id=str(receipt.id),
            storage_key=mask_storage_key(receipt.storage_key),
            property_id=str(receipt.property_id) if receipt.property_id else None,
        )
        return receipt

    def get_receipt(self, receipt_id: uuid.UUID, context: TenantContext) -> dict:
        """
        Get a receipt with presigned view and thumbnail URLs.

        Raises:
            NotFoundException: If receipt doesn't exist, is deleted or belongs to another account
        """
        receipt = self.receipt_repo.get_by_id(receipt_id, TenantScope.for_context(context))
        if not receipt:
            raise NotFoundException(f"Receipt {receipt_id} not found")
        return self._to_view(receipt)

    def get_unprocessed(self, context: TenantContext) -> tuple[list[dict], int]:
        """
        Get the account's unprocessed receipts, newest first.

        Returns:
            Tuple of (receipts, total_count)
        """
        receipts = self.receipt_repo.get_unprocessed(TenantScope.for_context(context))
        items = [self._to_view(receipt) for receipt in receipts]
        return items, len(items)

    def process_receipt(
        self, receipt_id: uuid.UUID, request: ReceiptProcess, context: TenantContext
    ) -> Expense:
        """
        Turn an unprocessed receipt into an expense.

        Preconditions are checked in order and fail before anything is
        written. The expense insert and the receipt transition commit
        together; the receipt_linked notification is relayed after commit.

        Raises:
            NotFoundException: Receipt, property, category or work order not found
            ConflictException: Receipt already processed (including by a concurrent caller)
            ValidationException: Work order belongs to a different property
        """
        scope = TenantScope.for_context(context)

        receipt = self.receipt_repo.get_by_id(receipt_id, scope)
        if not receipt:
            raise NotFoundException(f"Receipt {receipt_id} not found")

        if receipt.processed_at is not None:
            raise ConflictException(f"Receipt {receipt_id} is already processed")

        if not self.property_repo.exists(request.property_id, scope):
            raise NotFoundException(f"Property {request.property_id} not found")

        if not self.category_repo.get_by_id(request.category_id):
            raise NotFoundException(f"Expense category {request.category_id} not found")

        if request.work_order_id is not None:
            work_order = self.work_order_repo.get_by_id(request.work_order_id, scope)
            if not work_order:
                raise NotFoundException(f"Work order {request.work_order_id} not found")
            if work_order.property_id != request.property_id:
                raise ValidationException("Work order must belong to the same property as the expense")

        description = request.description.strip() if request.description else None

        expense = Expense(
            account_id=context.account_id,
            property_id=request.property_id,
            category_id=request.category_id,
            amount=request.amount,
            date=request.date,
            description=description or None,
            receipt_id=receipt.id,
            work_order_id=request.work_order_id,
            created_by_user_id=context.user_id,
        )

        try:
            expense = self.expense_repo.create_no_commit(expense)
            transitioned = self.receipt_repo.mark_processed_no_commit(
                receipt.id,
                scope,
                expense_id=expense.id,
                property_id=request.property_id,
                processed_at=utcnow(),
            )
            if not transitioned:
                raise ConflictException(f"Receipt {receipt_id} is already processed")
            self.outbox.enqueue_receipt_linked(context.account_id, receipt.id, expense.id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(expense)

        logger.info(
            "receipt_processed",
            receipt_id=str(receipt_id),
            expense_id=str(expense.id),
            property_id=str(request.property_id),
        )

        self.outbox.relay_pending(context.account_id)
        return expense

    def delete_receipt(self, receipt_id: uuid.UUID, context: TenantContext) -> None:
        """
        Soft-delete a receipt and request deletion of its storage objects.

        Storage deletion failures are logged and do not fail the delete.

        Raises:
            NotFoundException: If receipt doesn't exist, is already deleted or belongs to another account
        """
        receipt = self.receipt_repo.get_by_id(receipt_id, TenantScope.for_context(context))
        if not receipt:
            raise NotFoundException(f"Receipt {receipt_id} not found")

        storage_keys = [receipt.storage_key, receipt.thumbnail_storage_key]
        self.receipt_repo.soft_delete(receipt, utcnow())

        logger.info("receipt_deleted", receipt_id=str(receipt_id))

        if not self.uploads.delete_objects_best_effort(storage_keys):
            logger.warning("receipt_storage_delete_failed", receipt_id=str(receipt_id))
