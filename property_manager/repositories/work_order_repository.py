import uuid
from sqlalchemy.orm import Session
from property_manager.core.tenant_scope import TenantScope
from property_manager.models.work_order import WorkOrder


class WorkOrderRepository:
    """Repository for WorkOrder data access"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, work_order_id: uuid.UUID, scope: TenantScope) -> WorkOrder | None:
        """Get work order visible in scope (soft-deleted work orders excluded)"""
        query = self.db.query(WorkOrder).filter(WorkOrder.id == work_order_id)
        return scope.apply(query, WorkOrder).first()
