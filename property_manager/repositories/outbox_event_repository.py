import uuid
from sqlalchemy.orm import Session
from property_manager.models.outbox_event import OutboxEvent


class OutboxEventRepository:
    """Repository for OutboxEvent rows"""

    def __init__(self, db: Session):
        self.db = db

    def add_no_commit(self, event: OutboxEvent) -> OutboxEvent:
        """Stage an event in the current transaction"""
        self.db.add(event)
        self.db.flush()
        return event

    def get_pending(self, account_id: uuid.UUID, limit: int = 100) -> list[OutboxEvent]:
        """Get undispatched events for an account, oldest first"""
        return (
            self.db.query(OutboxEvent)
            .filter(OutboxEvent.account_id == account_id, OutboxEvent.dispatched_at.is_(None))
            .order_by(OutboxEvent.created_at)
            .limit(limit)
            .all()
        )
