"""
Post-commit notifications.

Events are written to the outbox inside the transaction that causes them
and relayed to a ReceiptNotifier only after that transaction commits.
Delivery is best-effort: failures are logged and the event stays pending.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass

from sqlalchemy.orm import Session

from property_manager.logging_config import get_logger
from property_manager.models.base import utcnow
from property_manager.models.outbox_event import OutboxEvent
from property_manager.repositories.outbox_event_repository import OutboxEventRepository

logger = get_logger(__name__)

RECEIPT_LINKED = "receipt_linked"


@dataclass(frozen=True)
class ReceiptLinkedEvent:
    """A receipt was processed into an expense"""

    receipt_id: uuid.UUID
    expense_id: uuid.UUID


class ReceiptNotifier(ABC):
    """Receives receipt events after they are committed"""

    @abstractmethod
    def notify_receipt_linked(self, account_id: uuid.UUID, event: ReceiptLinkedEvent) -> None:
        """Deliver a receipt_linked event to the account's listeners."""


class LoggingReceiptNotifier(ReceiptNotifier):
    """Default notifier: emits the event as a structured log line"""

    def notify_receipt_linked(self, account_id: uuid.UUID, event: ReceiptLinkedEvent) -> None:
        logger.info(
            "receipt_linked",
            account_id=str(account_id),
            receipt_id=str(event.receipt_id),
            expense_id=str(event.expense_id),
        )


def get_receipt_notifier() -> ReceiptNotifier:
    """FastAPI dependency for the receipt notifier"""
    return LoggingReceiptNotifier()


class NotificationOutbox:
    """Stages events in a transaction and relays them after commit"""

    def __init__(self, db: Session, notifier: ReceiptNotifier):
        self.db = db
        self.notifier = notifier
        self.repo = OutboxEventRepository(db)

    def enqueue_receipt_linked(
        self, account_id: uuid.UUID, receipt_id: uuid.UUID, expense_id: uuid.UUID
    ) -> OutboxEvent:
        """Stage a receipt_linked event; committed with the caller's transaction."""
        event = OutboxEvent(
            account_id=account_id,
            event_type=RECEIPT_LINKED,
            payload={"receipt_id": str(receipt_id), "expense_id": str(expense_id)},
        )
        return self.repo.add_no_commit(event)

    def relay_pending(self, account_id: uuid.UUID) -> int:
        """
        Deliver committed, undispatched events for an account.

        Never raises: a failed delivery is logged and the event is left
        pending for retry.

        Returns:
            Number of events delivered
        """
        delivered = 0
        try:
            events = self.repo.get_pending(account_id)
        except Exception:
            logger.warning("outbox_load_failed", account_id=str(account_id), exc_info=True)
            return 0

        for event in events:
            event.attempts += 1
            try:
                self._deliver(event)
            except Exception:
                logger.warning(
                    "notification_delivery_failed",
                    event_id=str(event.id),
                    event_type=event.event_type,
                    attempts=event.attempts,
                    exc_info=True,
                )
            else:
                event.dispatched_at = utcnow()
                delivered += 1

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.warning("outbox_update_failed", account_id=str(account_id), exc_info=True)

        return delivered

    def _deliver(self, event: OutboxEvent) -> None:
        if event.event_type == RECEIPT_LINKED:
            self.notifier.notify_receipt_linked(
                event.account_id,
                ReceiptLinkedEvent(
                    receipt_id=uuid.UUID(event.payload["receipt_id"]),
                    expense_id=uuid.UUID(event.payload["expense_id"]),
                ),
            )
        else:
            logger.warning("outbox_unknown_event_type", event_type=event.event_type)
