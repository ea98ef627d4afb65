import uuid
from datetime import datetime
from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from property_manager.core.tenant_scope import TenantScope
from property_manager.models.receipt import Receipt


class ReceiptRepository:
    """Repository for Receipt data access"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, receipt_id: uuid.UUID, scope: TenantScope) -> Receipt | None:
        """
        Get receipt by ID, ensuring it is visible in scope.

        Soft-deleted receipts are invisible unless the scope includes deleted rows.
        """
        query = (
            self.db.query(Receipt)
            .options(joinedload(Receipt.property))
            .filter(Receipt.id == receipt_id)
        )
        return scope.apply(query, Receipt).first()

    def get_unprocessed(self, scope: TenantScope) -> list[Receipt]:
        """Get unprocessed receipts, newest first"""
        query = (
            self.db.query(Receipt)
            .options(joinedload(Receipt.property))
            .filter(Receipt.processed_at.is_(None))
        )
        return scope.apply(query, Receipt).order_by(Receipt.created_at.desc()).all()

    def storage_key_exists(self, storage_key: str, scope: TenantScope) -> bool:
        """
        Check whether a receipt in scope already holds this storage key.

        Pass a scope that includes deleted rows to count soft-deleted receipts.
        """
        query = self.db.query(Receipt.id).filter(Receipt.storage_key == storage_key)
        return scope.apply(query, Receipt).first() is not None

    def create(self, receipt: Receipt) -> Receipt:
        """Create a new receipt"""
        self.db.add(receipt)
        self.db.commit()
        self.db.refresh(receipt)
        return receipt

    def mark_processed_no_commit(
        self,
        receipt_id: uuid.UUID,
        scope: TenantScope,
        expense_id: uuid.UUID,
        property_id: uuid.UUID,
        processed_at: datetime,
    ) -> bool:
        """
        Link a receipt to its expense if it is still unprocessed.

        The processed_at IS NULL condition is evaluated by the UPDATE itself,
        so of two concurrent callers only one can match the row.

        Returns:
            True if the receipt was transitioned, False if it was already
            processed (or vanished) by the time of the write
        """
        statement = scope.apply(
            update(Receipt).where(Receipt.id == receipt_id, Receipt.processed_at.is_(None)),
            Receipt,
        ).values(
            processed_at=processed_at,
            expense_id=expense_id,
            property_id=property_id,
            updated_at=processed_at,
        )
        result = self.db.execute(statement.execution_options(synchronize_session=False))
        return result.rowcount == 1

    def soft_delete(self, receipt: Receipt, deleted_at: datetime) -> None:
        """Mark a receipt as deleted"""
        receipt.deleted_at = deleted_at
        self.db.commit()
