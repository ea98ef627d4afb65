import uuid
from enum import Enum as PyEnum
from sqlalchemy import String, Text, ForeignKey, Enum, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from property_manager.models.base import Base, TimestampMixin, SoftDeleteMixin


class WorkOrderStatus(str, PyEnum):
    """Work order status enumeration"""

    REPORTED = "reported"
    ASSIGNED = "assigned"
    COMPLETED = "completed"


class WorkOrder(Base, TimestampMixin, SoftDeleteMixin):
    """Maintenance work order raised against a property"""

    __tablename__ = "work_orders"

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
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[WorkOrderStatus] = mapped_column(
        Enum(WorkOrderStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=WorkOrderStatus.REPORTED,
    )
