import uuid
import datetime
from decimal import Decimal
from sqlalchemy import String, Numeric, ForeignKey, Date, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from property_manager.models.base import Base, TimestampMixin, SoftDeleteMixin


class Expense(Base, TimestampMixin, SoftDeleteMixin):
    """
    Expense recorded against a property.

    receipt_id is a back-reference only; the receipt row owns the link
    through receipts.expense_id, so no foreign key is declared here.
    """

    __tablename__ = "expenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("expense_categories.id"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    receipt_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    work_order_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("work_orders.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_by_user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    __table_args__ = (
        Index("ix_expenses_account_property_date", "account_id", "property_id", "date"),
    )
