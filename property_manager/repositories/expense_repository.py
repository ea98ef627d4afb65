import uuid
from sqlalchemy.orm import Session
from property_manager.core.tenant_scope import TenantScope
from property_manager.models.expense import Expense


class ExpenseRepository:
    """Repository for Expense data access"""

    def __init__(self, db: Session):
        self.db = db

    def create_no_commit(self, expense: Expense) -> Expense:
        """Create expense without committing (for atomic ops)"""
        self.db.add(expense)
        self.db.flush()
        return expense

    def count_by_receipt(self, receipt_id: uuid.UUID, scope: TenantScope) -> int:
        """Count expenses created from a receipt"""
        query = self.db.query(Expense).filter(Expense.receipt_id == receipt_id)
        return scope.apply(query, Expense).count()
