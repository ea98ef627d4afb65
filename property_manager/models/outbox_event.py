"""Outbox rows for notifications emitted after a commit."""

import uuid
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, ForeignKey, JSON, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from property_manager.models.base import Base, utcnow


class OutboxEvent(Base):
    """
    Pending notification written in the same transaction as the change it
    describes.

    Relayed to the notifier after commit; dispatched_at stays NULL until a
    delivery succeeds so an out-of-band worker can retry.
    """

    __tablename__ = "outbox_events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dispatched_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        Index("ix_outbox_events_account_pending", "account_id", "dispatched_at"),
    )
