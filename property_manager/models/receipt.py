import uuid
from datetime import datetime
from sqlalchemy import String, BigInteger, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING, Optional
from property_manager.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from property_manager.models.property import Property


class Receipt(Base, TimestampMixin, SoftDeleteMixin):
    """
    Uploaded receipt image or PDF awaiting (or after) processing.

    Lifecycle: Unprocessed (processed_at is NULL) -> Processed (terminal).
    processed_at and expense_id are set together exactly once; afterwards
    property_id, expense_id and processed_at never change.
    Receipts are soft-deleted only.
    """

    __tablename__ = "receipts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    storage_key: Mapped[str] = mapped_column(String(500), nullable=False, unique=True)
    thumbnail_storage_key: Mapped[str | None] = mapped_column(String(500), nullable=True)
    original_file_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    file_size_bytes: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
    )
    expense_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("expenses.id", ondelete="SET NULL"),
        nullable=True,
    )
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    # Relationships
    property: Mapped[Optional["Property"]] = relationship("Property")

    __table_args__ = (
        Index("ix_receipts_account_processed", "account_id", "processed_at"),
    )
